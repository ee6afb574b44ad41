"""
CLI commands package for SaveWatch
"""

from .watch import watch_command
from .init_config import init_config_command

__all__ = [
    'watch_command',
    'init_config_command',
]
