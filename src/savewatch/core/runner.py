"""
Respawn loop around the file watcher
"""

import logging
import threading
import time
from typing import Any, Callable, Optional

from .errors import WatcherError, WatchSetupError
from .session import WatchSession, WatchdogSession
from .watcher import FileWatcher


logger = logging.getLogger(__name__)


class WatchRunner:
    """Keep a FileWatcher alive by respawning it after each failure.

    A setup failure on the first attempt is final, since it usually means
    the target path is wrong. Every later failure, setup failures included,
    counts as a restart. Once ``max_restarts`` is exceeded the runner gives
    up; ``max_restarts=0`` never gives up.
    """

    def __init__(self, filename: str, file_changes: Any, max_restarts: int = 5,
                 restart_delay: float = 1.0,
                 session_factory: Callable[[], WatchSession] = WatchdogSession):
        self.filename = filename
        self.file_changes = file_changes
        self.max_restarts = max_restarts
        self.restart_delay = restart_delay
        self.session_factory = session_factory
        self.restarts = 0
        self.error: Optional[Exception] = None
        self._thread: Optional[threading.Thread] = None

    def run(self) -> None:
        """Run the watcher until the restart policy gives up, then re-raise"""
        while True:
            watcher = FileWatcher(self.filename, self.file_changes,
                                  session_factory=self.session_factory)
            try:
                watcher.run()
            except WatchSetupError as e:
                if self.restarts == 0:
                    logger.error("Could not watch %s: %s", self.filename, e)
                    self.error = e
                    raise
                self._handle_failure(e)
            except WatcherError as e:
                self._handle_failure(e)

    def _handle_failure(self, error: WatcherError) -> None:
        if self.max_restarts and self.restarts >= self.max_restarts:
            logger.error("Giving up on %s after %d restarts: %s",
                         self.filename, self.restarts, error)
            self.error = error
            raise error

        self.restarts += 1
        logger.warning("Watcher for %s stopped (%s), restarting in %.1fs",
                       self.filename, error, self.restart_delay)
        time.sleep(self.restart_delay)

    def _run_in_thread(self) -> None:
        try:
            self.run()
        except WatcherError:
            # Already logged and kept on self.error for the owner to inspect
            pass
        except Exception as e:
            logger.exception("Watch loop for %s crashed", self.filename)
            self.error = e

    def start(self) -> threading.Thread:
        """Run the respawn loop on a daemon thread"""
        self._thread = threading.Thread(
            target=self._run_in_thread, name=f"savewatch-{self.filename}", daemon=True
        )
        self._thread.start()
        return self._thread

    def is_alive(self) -> bool:
        """Check if the respawn loop is still running"""
        return self._thread is not None and self._thread.is_alive()
