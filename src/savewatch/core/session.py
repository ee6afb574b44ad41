"""
Watch sessions: the OS-level directory watch consumed by the file watcher

A session exposes two streams, raw events and errors, multiplexed into a
single queue so a consumer can block on both at once. Notifications come
out in arrival order; neither stream has priority over the other.
"""

import errno
import logging
import os
import queue
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

from .events import Op, RawEvent
from ..utils.path_utils import normalize_path


logger = logging.getLogger(__name__)

EVENTS = 'events'
ERRORS = 'errors'

DEFAULT_HEALTH_INTERVAL = 0.5


@dataclass(frozen=True)
class Notification:
    """One item from a session stream.

    ``value`` is a RawEvent on the events stream and an exception on the
    errors stream. ``closed`` marks the end of the stream it belongs to.
    """
    stream: str
    value: Any = None
    closed: bool = False


class WatchSession:
    """Capability interface over an OS-level directory watch.

    Sessions are context managers; leaving the ``with`` block releases the
    watch. ``close`` must be safe to call more than once.
    """

    def watch(self, directory: str) -> None:
        """Bind a directory to this session"""
        raise NotImplementedError

    def receive(self, timeout: Optional[float] = None) -> Optional[Notification]:
        """Block until the next notification, or return None on timeout"""
        raise NotImplementedError

    def close(self) -> None:
        """Release the watch"""
        raise NotImplementedError

    def __enter__(self) -> 'WatchSession':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ForwardingHandler(FileSystemEventHandler):
    """Event handler translating watchdog events into raw events"""

    def __init__(self, directory: str, notifications: 'queue.Queue[Notification]'):
        super().__init__()
        self.directory = directory
        self.notifications = notifications
        # path -> (st_mtime_ns, st_size) as of the last create/modify
        self.snapshots: Dict[str, Tuple[int, int]] = {}

    def forward(self, path: str, op: Op):
        self.notifications.put(Notification(EVENTS, RawEvent(path, op)))

    def fail(self, error: BaseException):
        self.notifications.put(Notification(ERRORS, error))

    def content_changed(self, path: str) -> bool:
        """Check whether a file's contents moved on since the last snapshot.

        watchdog reports attribute-only changes (chmod, chown, touch of
        xattrs) as modifications, so a modification that leaves mtime and
        size untouched is treated as a permission change.
        """
        try:
            stat = os.stat(path)
        except OSError:
            # Gone already; let the write through
            self.snapshots.pop(path, None)
            return True

        snapshot = (stat.st_mtime_ns, stat.st_size)
        previous = self.snapshots.get(path)
        self.snapshots[path] = snapshot
        return previous != snapshot

    def snapshot_directory(self) -> None:
        """Record a snapshot of every file already in the directory.

        Without a baseline the first modification of an existing file could
        not be told apart from a chmod.
        """
        with os.scandir(self.directory) as entries:
            for entry in entries:
                try:
                    if entry.is_dir():
                        continue
                    stat = entry.stat()
                except OSError:
                    continue
                self.snapshots[normalize_path(entry.path)] = (stat.st_mtime_ns, stat.st_size)

    def on_created(self, event):
        path = normalize_path(event.src_path)
        if not event.is_directory:
            self.content_changed(path)
        self.forward(path, Op.CREATE)

    def on_modified(self, event):
        path = normalize_path(event.src_path)
        if event.is_directory:
            self.forward(path, Op.WRITE)
            return
        self.forward(path, Op.WRITE if self.content_changed(path) else Op.CHMOD)

    def on_deleted(self, event):
        path = normalize_path(event.src_path)
        if event.is_directory and path == self.directory:
            self.fail(FileNotFoundError(errno.ENOENT, "Watched directory was removed", path))
            return
        self.snapshots.pop(path, None)
        self.forward(path, Op.REMOVE)

    def on_moved(self, event):
        # A move within the directory is a rename away from the source and
        # a create of the destination, e.g. a swap file replacing the target.
        src_path = normalize_path(event.src_path)
        dest_path = normalize_path(event.dest_path)
        self.snapshots.pop(src_path, None)
        self.forward(src_path, Op.RENAME)
        if os.path.dirname(dest_path) == self.directory:
            if not event.is_directory:
                self.content_changed(dest_path)
            self.forward(dest_path, Op.CREATE)


class WatchdogSession(WatchSession):
    """Directory watch backed by a watchdog Observer"""

    def __init__(self, health_interval: float = DEFAULT_HEALTH_INTERVAL):
        self.health_interval = health_interval
        self.observer = Observer()
        self.directory: Optional[str] = None
        self.handler: Optional[ForwardingHandler] = None
        self._notifications: 'queue.Queue[Notification]' = queue.Queue()
        self._watch = None
        self._lock = threading.Lock()
        self._closed = False
        self._failed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def watch(self, directory: str) -> None:
        """Schedule a non-recursive watch on a directory and start observing.

        Raises:
            FileNotFoundError: If the directory does not exist
            NotADirectoryError: If the path is not a directory
            PermissionError: If the directory cannot be listed
            OSError: If watchdog cannot set up the watch
        """
        directory = normalize_path(directory)
        if not os.path.exists(directory):
            raise FileNotFoundError(errno.ENOENT, "Watch directory does not exist", directory)
        if not os.path.isdir(directory):
            raise NotADirectoryError(errno.ENOTDIR, "Watch path is not a directory", directory)
        if not os.access(directory, os.R_OK | os.X_OK):
            raise PermissionError(errno.EACCES, "Watch directory is not accessible", directory)

        self.directory = directory
        self.handler = ForwardingHandler(directory, self._notifications)
        self.handler.snapshot_directory()
        self._watch = self.observer.schedule(self.handler, directory, recursive=False)
        if not self.observer.is_alive():
            self.observer.start()
        logger.debug("Observer started for %s", directory)

    def receive(self, timeout: Optional[float] = None) -> Optional[Notification]:
        """Block until the next notification.

        While waiting, the observer is checked every ``health_interval``
        seconds so a dead observer or emitter ends up on the streams instead
        of leaving the caller blocked forever.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            wait = self.health_interval
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None
                wait = min(wait, remaining)

            try:
                return self._notifications.get(timeout=wait)
            except queue.Empty:
                self.check_health()

    def check_health(self) -> None:
        """Report a stopped observer or emitter on the appropriate stream"""
        if self._failed or self._watch is None:
            return

        if not self.observer.is_alive():
            self._failed = True
            self._notifications.put(Notification(EVENTS, closed=True))
            return

        if not self._emitters_alive():
            self._failed = True
            self._notifications.put(Notification(
                ERRORS, RuntimeError(f"watch on {self.directory} stopped unexpectedly")
            ))

    def _emitters_alive(self) -> bool:
        emitters: List[Any] = [e for e in self.observer.emitters if e.watch == self._watch]
        return bool(emitters) and all(e.is_alive() for e in emitters)

    def close(self) -> None:
        """Stop the observer and release the watch. Safe to call repeatedly."""
        with self._lock:
            if self._closed:
                return
            self._closed = True

        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
        logger.debug("Observer for %s released", self.directory)
