"""
Exceptions raised when a watch session ends
"""


class WatcherError(Exception):
    """Base class for every way a watch run can end"""


class WatchSetupError(WatcherError):
    """The directory watch could not be established"""


class StreamClosedError(WatcherError):
    """The raw event stream closed while the watcher was waiting on it"""


class WatchRuntimeError(WatcherError):
    """The watch subsystem reported an error; the cause is chained"""


class ErrorStreamClosedError(WatcherError):
    """The error stream closed while the watcher was waiting on it"""
