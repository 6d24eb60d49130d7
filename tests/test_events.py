"""
Event Bus Tests
===============
Tests for single-subscriber delivery, idempotent teardown and payload parsing.
"""

import threading

import pytest

from excel_analyzer.app.events import (
    EventBus,
    EventType,
    ProgressSnapshot,
    error_message_from_payload,
    make_error_payload,
    make_progress_payload,
    progress_from_payload,
)


class TestEventBus:
    """Tests for EventBus."""
    
    def test_publish_reaches_subscriber(self):
        """A subscribed handler receives the payload."""
        bus = EventBus()
        received = []
        bus.subscribe(EventType.PROGRESS, received.append)
        
        assert bus.publish(EventType.PROGRESS, {"percent": 10}) is True
        assert received == [{"percent": 10}]
    
    def test_second_subscribe_replaces_first(self):
        """After subscribe(h1), subscribe(h2) only h2 receives events."""
        bus = EventBus()
        first, second = [], []
        bus.subscribe("progress", first.append)
        bus.subscribe("progress", second.append)
        
        bus.publish("progress", "x")
        assert first == []
        assert second == ["x"]
        assert bus.subscription_count() == 1
    
    def test_enum_and_string_names_are_the_same_channel(self):
        bus = EventBus()
        received = []
        bus.subscribe(EventType.ERROR, received.append)
        bus.publish("error", "boom")
        assert received == ["boom"]
    
    def test_publish_without_subscriber_is_dropped(self):
        """publish() to an unregistered name never raises."""
        bus = EventBus()
        assert bus.publish(EventType.ERROR, {"message": "lost"}) is False
    
    def test_unsubscribe_is_idempotent(self):
        """unsubscribe() twice or on an unknown name never raises."""
        bus = EventBus()
        bus.subscribe(EventType.PROGRESS, lambda payload: None)
        
        assert bus.unsubscribe(EventType.PROGRESS) is True
        assert bus.unsubscribe(EventType.PROGRESS) is False
        assert bus.unsubscribe("never-registered") is False
        assert bus.subscription_count() == 0
    
    def test_unsubscribe_with_stale_id_keeps_newer_handler(self):
        """Removing an old registration does not detach its replacement."""
        bus = EventBus()
        old_id = bus.subscribe(EventType.PROGRESS, lambda payload: None)
        received = []
        new_id = bus.subscribe(EventType.PROGRESS, received.append)
        
        assert new_id != old_id
        assert bus.unsubscribe(EventType.PROGRESS, old_id) is False
        bus.publish(EventType.PROGRESS, 1)
        assert received == [1]
        assert bus.unsubscribe(EventType.PROGRESS, new_id) is True
    
    def test_handler_may_unsubscribe_itself_during_delivery(self):
        """The in-flight event completes; the next one is dropped."""
        bus = EventBus()
        received = []
        
        def handler(payload):
            received.append(payload)
            bus.unsubscribe(EventType.ERROR)
        
        bus.subscribe(EventType.ERROR, handler)
        assert bus.publish(EventType.ERROR, "first") is True
        assert bus.publish(EventType.ERROR, "second") is False
        assert received == ["first"]
    
    def test_has_subscriber_and_clear(self):
        bus = EventBus()
        bus.subscribe(EventType.PROGRESS, lambda payload: None)
        bus.subscribe(EventType.ERROR, lambda payload: None)
        assert bus.has_subscriber(EventType.PROGRESS)
        
        bus.clear()
        assert not bus.has_subscriber(EventType.PROGRESS)
        assert bus.subscription_count() == 0
    
    def test_concurrent_publishers(self):
        """Events published from several threads all reach the handler."""
        bus = EventBus()
        received = []
        lock = threading.Lock()
        
        def handler(payload):
            with lock:
                received.append(payload)
        
        bus.subscribe(EventType.PROGRESS, handler)
        threads = [
            threading.Thread(target=lambda n=n: [bus.publish(EventType.PROGRESS, n) for _ in range(50)])
            for n in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        
        assert len(received) == 200


class TestPayloads:
    """Tests for payload helpers."""
    
    def test_make_progress_payload_clamps(self):
        assert make_progress_payload(150, "done") == {"percent": 100, "label": "done"}
        assert make_progress_payload(-5) == {"percent": 0, "label": ""}
    
    def test_progress_from_mapping(self):
        snapshot = progress_from_payload({"percent": 55, "label": "aggregating"})
        assert snapshot == ProgressSnapshot(55, "aggregating")
    
    def test_progress_from_legacy_keys(self):
        """num/text payloads are accepted too."""
        assert progress_from_payload({"num": 25, "text": "reading"}) == ProgressSnapshot(25, "reading")
    
    def test_progress_from_snapshot_and_number(self):
        assert progress_from_payload(ProgressSnapshot(40, "x")) == ProgressSnapshot(40, "x")
        assert progress_from_payload(70.9) == ProgressSnapshot(70, "")
    
    @pytest.mark.parametrize("payload", [None, "ten", {"label": "no percent"}, {"percent": "abc"}, True])
    def test_progress_rejects_malformed(self, payload):
        with pytest.raises(ValueError):
            progress_from_payload(payload)
    
    def test_error_message_from_payload(self):
        assert error_message_from_payload(make_error_payload("corrupt file")) == "corrupt file"
        assert error_message_from_payload("plain text") == "plain text"
        assert error_message_from_payload({"error": "alt key"}) == "alt key"
        assert error_message_from_payload(None) == ""
