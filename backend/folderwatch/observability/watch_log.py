"""
Watch event logging.

Records every registry mutation with an explicit changed/unchanged outcome,
so stale or speculative notifications that turned into no-ops stay visible.

Design principles:
- Log every call, including no-ops and failed rescans
- Explicit error message on failure
- In-memory ring buffer (last 200 events by default)
- No persistent storage (debug only)
"""

import logging
from collections import deque
from datetime import datetime
from enum import Enum
from typing import Any, Deque, Dict, List, Optional
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

# Maximum watch events to keep in memory
MAX_WATCH_EVENTS = 200


class WatchEventType(str, Enum):
    """Types of watch events."""

    ADJUST = "adjust"  # Root rescan completed
    ADJUST_FAILED = "adjust_failed"  # Root rescan rejected
    CREATION = "creation"  # Folder created notification
    DELETION = "deletion"  # Folder deleted notification
    IGNORE = "ignore"  # Operator excluded a folder
    REINSTATE = "reinstate"  # Operator re-included a folder


class WatchEvent(BaseModel):
    """A single watch event."""

    model_config = ConfigDict(extra="forbid")

    event_type: WatchEventType
    timestamp: str  # ISO format
    path: str

    # Whether the watched folders were mutated
    changed: bool = False

    # Folder count after a successful rescan
    folder_count: Optional[int] = None

    # Failure detail
    error_message: Optional[str] = None


class WatchEventLog:
    """
    In-memory log of watch events.

    Usage:
        log = WatchEventLog()
        log.record(WatchEventType.IGNORE, "/root/sub", changed=True)
        log.record_adjust("/root", folder_count=4)
        log.record_adjust_failed("/missing", "Directory does not exist: '/missing'")
    """

    def __init__(self, max_events: int = MAX_WATCH_EVENTS):
        self._events: Deque[WatchEvent] = deque(maxlen=max_events)

    def __len__(self) -> int:
        return len(self._events)

    @property
    def max_events(self) -> Optional[int]:
        return self._events.maxlen

    def _now(self) -> str:
        return datetime.now().isoformat()

    def _append(self, event: WatchEvent) -> None:
        self._events.append(event)
        logger.debug(
            f"[WATCH_LOG] {event.event_type.value}: {event.path} (changed={event.changed})"
        )

    def record(self, event_type: WatchEventType, path: str, changed: bool) -> None:
        """Record a single-folder notification or operator command."""
        self._append(WatchEvent(
            event_type=event_type,
            timestamp=self._now(),
            path=path,
            changed=changed,
        ))

    def record_adjust(self, root: str, folder_count: int) -> None:
        """Record a completed root rescan."""
        self._append(WatchEvent(
            event_type=WatchEventType.ADJUST,
            timestamp=self._now(),
            path=root,
            changed=True,
            folder_count=folder_count,
        ))

    def record_adjust_failed(self, root: str, error_message: str) -> None:
        """Record a rejected root rescan. The watched folders were not touched."""
        self._append(WatchEvent(
            event_type=WatchEventType.ADJUST_FAILED,
            timestamp=self._now(),
            path=root,
            changed=False,
            error_message=error_message,
        ))

    def get_events(self, limit: Optional[int] = None) -> List[WatchEvent]:
        """
        Get recent watch events.

        Args:
            limit: Maximum events to return (default: all)

        Returns:
            List of events, most recent first
        """
        events = list(self._events)
        events.reverse()
        if limit:
            events = events[:limit]
        return events

    def get_events_as_dicts(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Recent events as JSON-ready dicts, most recent first."""
        return [e.model_dump(mode="json") for e in self.get_events(limit)]

    def clear(self) -> None:
        """Clear all events."""
        self._events.clear()
