"""
Test doubles shared by the test modules
"""

from typing import Iterable, List, Optional

from savewatch.core.events import Op, RawEvent
from savewatch.core.session import EVENTS, ERRORS, Notification, WatchSession


def event(path: str, op: Op) -> Notification:
    """Build an events-stream notification"""
    return Notification(EVENTS, RawEvent(path, op))


def error(exc) -> Notification:
    """Build an errors-stream notification"""
    return Notification(ERRORS, exc)


class ScriptedSession(WatchSession):
    """Session that replays a fixed list of notifications.

    Once the script runs out the events stream reports itself closed, like a
    subsystem that shut down.
    """

    def __init__(self, notifications: Iterable[Notification] = (),
                 watch_error: Optional[BaseException] = None):
        self.notifications: List[Notification] = list(notifications)
        self.watch_error = watch_error
        self.watched: List[str] = []
        self.close_calls = 0

    def watch(self, directory: str) -> None:
        if self.watch_error is not None:
            raise self.watch_error
        self.watched.append(directory)

    def receive(self, timeout=None) -> Notification:
        if not self.notifications:
            return Notification(EVENTS, closed=True)
        return self.notifications.pop(0)

    def close(self) -> None:
        self.close_calls += 1


class SessionFactory:
    """Hand out prepared sessions in order, remembering each one"""

    def __init__(self, *sessions: WatchSession):
        self.pending = list(sessions)
        self.created: List[WatchSession] = []

    def __call__(self) -> WatchSession:
        session = self.pending.pop(0) if self.pending else ScriptedSession()
        self.created.append(session)
        return session
