"""
SaveWatch - Reliable change notifications for a single file
"""

__version__ = "0.1.0"
__description__ = "Notify when a file is saved, whatever write pattern the editor uses."

from .core import (
    Config,
    load_config,
    FileWatcher,
    WatchRunner,
    WatcherError,
    WatchSetupError,
    StreamClosedError,
    WatchRuntimeError,
    ErrorStreamClosedError,
)

__all__ = [
    'FileWatcher',
    'WatchRunner',
    'Config',
    'load_config',
    'WatcherError',
    'WatchSetupError',
    'StreamClosedError',
    'WatchRuntimeError',
    'ErrorStreamClosedError',
]
