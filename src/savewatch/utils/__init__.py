"""Utility functions for SaveWatch."""

from .path_utils import (
    bytes_to_string,
    normalize_path,
    parent_directory,
)
from .logging_utils import setup_logger

__all__ = [
    # Path utilities
    'bytes_to_string',
    'normalize_path',
    'parent_directory',
    # Logging utilities
    'setup_logger',
]
