"""Core functionality for SaveWatch."""

from .config import Config, load_config, load_default_config
from .errors import (
    WatcherError,
    WatchSetupError,
    StreamClosedError,
    WatchRuntimeError,
    ErrorStreamClosedError,
)
from .events import Op, RawEvent, is_qualifying
from .session import Notification, WatchSession, WatchdogSession
from .watcher import FileWatcher
from .runner import WatchRunner

__all__ = [
    'Config', 'load_config', 'load_default_config',
    'WatcherError', 'WatchSetupError', 'StreamClosedError',
    'WatchRuntimeError', 'ErrorStreamClosedError',
    'Op', 'RawEvent', 'is_qualifying',
    'Notification', 'WatchSession', 'WatchdogSession',
    'FileWatcher', 'WatchRunner',
]
