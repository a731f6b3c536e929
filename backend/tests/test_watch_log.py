"""
Tests for the watch event log ring buffer.
"""

from folderwatch.observability import WatchEventLog, WatchEventType


class TestWatchEventLog:

    def test_events_are_most_recent_first(self):
        log = WatchEventLog()
        log.record(WatchEventType.CREATION, "/a", changed=True)
        log.record(WatchEventType.DELETION, "/b", changed=False)

        events = log.get_events()

        assert [e.path for e in events] == ["/b", "/a"]
        assert events[0].changed is False

    def test_limit(self):
        log = WatchEventLog()
        for i in range(5):
            log.record(WatchEventType.IGNORE, f"/{i}", changed=True)

        assert [e.path for e in log.get_events(limit=2)] == ["/4", "/3"]

    def test_ring_buffer_drops_oldest(self):
        log = WatchEventLog(max_events=3)
        for i in range(5):
            log.record(WatchEventType.CREATION, f"/{i}", changed=True)

        assert len(log) == 3
        assert log.max_events == 3
        assert [e.path for e in log.get_events()] == ["/4", "/3", "/2"]

    def test_adjust_events_carry_outcome(self):
        log = WatchEventLog()
        log.record_adjust("/root", folder_count=4)
        log.record_adjust_failed("/missing", "Directory does not exist: '/missing'")

        failed, succeeded = log.get_events()

        assert succeeded.event_type == WatchEventType.ADJUST
        assert succeeded.folder_count == 4
        assert succeeded.changed is True
        assert failed.event_type == WatchEventType.ADJUST_FAILED
        assert failed.changed is False
        assert failed.error_message == "Directory does not exist: '/missing'"

    def test_dicts_are_json_ready(self):
        log = WatchEventLog()
        log.record(WatchEventType.REINSTATE, "/a", changed=True)

        (event,) = log.get_events_as_dicts()

        assert event["event_type"] == "reinstate"
        assert event["path"] == "/a"
        assert isinstance(event["timestamp"], str)

    def test_clear(self):
        log = WatchEventLog()
        log.record(WatchEventType.CREATION, "/a", changed=True)

        log.clear()

        assert len(log) == 0
        assert log.get_events() == []
