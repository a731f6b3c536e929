"""
Observability for the folder watcher.

Provides an in-memory event log of registry mutations for debugging
notification races (deletions arriving twice, ignores for folders that
were already removed, and so on).
"""

from .watch_log import WatchEventLog, WatchEvent, WatchEventType, MAX_WATCH_EVENTS

__all__ = [
    "WatchEventLog",
    "WatchEvent",
    "WatchEventType",
    "MAX_WATCH_EVENTS",
]
