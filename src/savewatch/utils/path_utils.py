"""
Path utilities for SaveWatch
"""

import os
from pathlib import Path
from typing import Any, Union


def bytes_to_string(data: Any) -> str:
    """Convert bytes to string with minimal processing.

    watchdog may hand out paths as bytes when the watch was scheduled with a
    bytes path, so every path from an event goes through here.

    Args:
        data: Data to convert, can be bytes or other types

    Returns:
        String representation with null bytes removed
    """
    if isinstance(data, bytes):
        return os.fsdecode(data).rstrip('\x00')
    return str(data).rstrip('\x00')


def normalize_path(path: Union[str, Path]) -> str:
    """Normalize a path to an absolute string without resolving symlinks.

    Targets and event paths are compared as strings, so both sides go
    through the same normalization.
    """
    return os.path.abspath(bytes_to_string(os.fspath(path)))


def parent_directory(path: Union[str, Path]) -> str:
    """Get the normalized parent directory of a file path.

    A bare filename lives in the current working directory.
    """
    return os.path.dirname(normalize_path(path))
