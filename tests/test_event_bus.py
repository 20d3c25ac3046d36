"""Tests for the publish/subscribe event bus."""

from unittest import TestCase

from personality.event_bus import EventBus, EventType


class TestEventBus(TestCase):
    def setUp(self):
        self.bus = EventBus()
        self.received = []

    def _handler(self, data):
        self.received.append(data)

    def test_publish_reaches_subscribers(self):
        self.bus.subscribe(EventType.MOOD_CHANGED, self._handler)

        self.bus.publish(EventType.MOOD_CHANGED, {"to": "happy"})
        self.bus.publish(EventType.MOOD_DECAYED, {"to": "curious"})

        assert self.received == [{"to": "happy"}]

    def test_unsubscribe(self):
        self.bus.subscribe(EventType.ACTION_SELECTED, self._handler)
        self.bus.unsubscribe(EventType.ACTION_SELECTED, self._handler)

        self.bus.publish(EventType.ACTION_SELECTED, "explore")

        assert self.received == []

    def test_failing_handler_is_isolated(self):
        def explode(_data):
            raise ValueError("broken observer")

        self.bus.subscribe(EventType.STRATEGY_FALLBACK, explode)
        self.bus.subscribe(EventType.STRATEGY_FALLBACK, self._handler)

        with self.assertLogs("personality.event_bus", level="ERROR"):
            self.bus.publish(EventType.STRATEGY_FALLBACK, "timeout")

        assert self.received == ["timeout"]

    def test_clear(self):
        self.bus.subscribe(EventType.MICRO_BEHAVIOR, self._handler)
        self.bus.clear()

        self.bus.publish(EventType.MICRO_BEHAVIOR, "ear_twitch")

        assert self.received == []
