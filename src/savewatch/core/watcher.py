"""
File watcher that reports when a single file changes
"""

import logging
import os
from typing import Any, Callable

from .errors import (
    ErrorStreamClosedError,
    StreamClosedError,
    WatchRuntimeError,
    WatchSetupError,
)
from .events import RawEvent, is_qualifying
from .session import EVENTS, WatchSession, WatchdogSession
from ..utils.path_utils import normalize_path, parent_directory


logger = logging.getLogger(__name__)


class FileWatcher:
    """Watch a file for changes and notify a channel.

    The parent directory is watched rather than the file itself. Some
    editors like VIM write to a swap file and then move it over the
    original, so a watch on the original would be lost on the first save.
    That is also why both WRITE and CREATE events count: VIM's save ends in
    a create of the target, while VSCode does a WRITE followed by a CHMOD,
    so tracking WRITE catches VSCode's saves exactly once.
    """

    def __init__(self, filename: str, file_changes: Any,
                 session_factory: Callable[[], WatchSession] = WatchdogSession):
        """Initialize the file watcher

        Args:
            filename: Path of the file to watch
            file_changes: Caller-owned channel with a blocking ``put``
                (typically a ``queue.Queue``); receives ``True`` per change
            session_factory: Callable returning a new watch session
        """
        self.filename = filename
        self.file_changes = file_changes
        self.session_factory = session_factory

    def run(self) -> None:
        """Watch until the session fails.

        Blocks the calling thread. There is no normal exit: every way out
        raises, and it is up to the caller to respawn the watcher if it
        wants to keep watching.

        Raises:
            WatchSetupError: If the directory watch cannot be established
            StreamClosedError: If the raw event stream closes
            WatchRuntimeError: If the watch subsystem reports an error
            ErrorStreamClosedError: If the error stream closes
        """
        try:
            target = normalize_path(self.filename)
            session = self.session_factory()
        except Exception as e:
            raise WatchSetupError(f"error watching for changes: {e}") from e

        directory = parent_directory(target)

        with session:
            try:
                session.watch(directory)
            except Exception as e:
                raise WatchSetupError(f"error watching {directory} for changes: {e}") from e

            logger.debug("Watching %s for changes to %s", directory, os.path.basename(target))

            while True:
                notification = session.receive()

                if notification.stream == EVENTS:
                    if notification.closed:
                        raise StreamClosedError("something is weird with the file watcher")
                    self.handle_event(notification.value, target)
                    continue

                if notification.closed:
                    raise ErrorStreamClosedError(
                        "something is weird with the file watcher around error handling"
                    )
                cause = notification.value
                if not isinstance(cause, BaseException):
                    cause = RuntimeError(cause)
                raise WatchRuntimeError(f"error in file watcher: {cause}") from cause

    def handle_event(self, event: RawEvent, target: str) -> bool:
        """Send a change signal if the event qualifies. Returns whether it did."""
        if not is_qualifying(event, target):
            return False

        logger.debug("Change detected: %s", event)
        # Blocks until the consumer has room
        self.file_changes.put(True)
        return True
