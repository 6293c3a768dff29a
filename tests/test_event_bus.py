"""Tests for the event bus."""

import pytest

from luxacast.events import (
    ConnectionClosed,
    ConnectionFailed,
    ConnectionOpened,
    EventBus,
)


class TestEventBus:
    """Tests for EventBus."""

    def test_publish_to_subscribers_in_order(self):
        """Handlers run in subscription order with the event instance."""
        bus = EventBus()
        calls = []

        bus.subscribe(ConnectionClosed, lambda e: calls.append(("first", e.code)))
        bus.subscribe(ConnectionClosed, lambda e: calls.append(("second", e.reason)))
        bus.publish(ConnectionClosed(code=1000, reason="bye"))

        assert calls == [("first", 1000), ("second", "bye")]

    def test_events_routed_by_type(self):
        """Only handlers of the published type are called."""
        bus = EventBus()
        opened, failed = [], []

        bus.subscribe(ConnectionOpened, opened.append)
        bus.subscribe(ConnectionFailed, failed.append)
        bus.publish(ConnectionFailed(error=OSError("x")))

        assert opened == []
        assert len(failed) == 1

    def test_duplicate_subscription_delivers_once(self):
        """Subscribing the same handler twice delivers each event once."""
        bus = EventBus()
        calls = []

        def handler(event):
            calls.append(event)

        bus.subscribe(ConnectionOpened, handler)
        bus.subscribe(ConnectionOpened, handler)
        bus.publish(ConnectionOpened(handle=object()))

        assert len(calls) == 1

    def test_async_handler_rejected(self):
        """Coroutine functions cannot be subscribed."""
        bus = EventBus()

        async def handler(event):
            pass

        with pytest.raises(TypeError, match="synchronous"):
            bus.subscribe(ConnectionOpened, handler)

    def test_failing_handler_does_not_stop_delivery(self):
        """A raising handler is logged and later handlers still run."""
        bus = EventBus()
        calls = []

        def broken(event):
            raise RuntimeError("bad handler")

        bus.subscribe(ConnectionClosed, broken)
        bus.subscribe(ConnectionClosed, calls.append)
        bus.publish(ConnectionClosed(code=1006))

        assert len(calls) == 1

    def test_handlers_are_keyed_by_exact_type(self):
        """Publishing one event type does not reach handlers of another."""
        bus = EventBus()
        calls = []

        bus.subscribe(ConnectionOpened, calls.append)
        bus.publish(ConnectionClosed(code=1000))

        assert calls == []

    def test_events_carry_timestamp(self):
        """Every event gets a creation timestamp."""
        event = ConnectionClosed(code=1000)

        assert event.timestamp > 0
        assert event.reason == ""
