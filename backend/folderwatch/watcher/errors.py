"""
Watcher error hierarchy.

All errors are non-fatal to the registry. A failed operation leaves the
watched folders exactly as they were before the call.
"""


class WatcherError(Exception):
    """Base exception for folder watcher failures."""

    pass


class PathNotFoundError(WatcherError):
    """Root path does not exist as a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Directory does not exist: '{path}'")


class ProbeTimeoutError(WatcherError):
    """Root enumeration did not finish within the allowed time."""

    def __init__(self, path: str, timeout_seconds: float):
        self.path = path
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Enumeration of '{path}' timed out after {timeout_seconds}s"
        )
