"""Tests for the application wiring."""

import json

from luxacast.app import LuxacastApp
from luxacast.rules import DISCONNECTED, GREEN, OFF, RED


def _state(**flags) -> str:
    return json.dumps({"type": "state", "state": flags})


class TestLuxacastApp:
    """Tests for LuxacastApp."""

    def test_start_turns_off_and_connects(self, manager, transport, indicator):
        """start() clears the indicator and activates the connection."""
        app = LuxacastApp(manager, indicator)

        app.start()

        assert indicator.history == [OFF]
        assert manager.should_reconnect
        assert len(transport.handles) == 1

    def test_state_packets_set_color(self, manager, transport, indicator):
        """State packets received on the open connection drive the colour."""
        app = LuxacastApp(manager, indicator)
        app.start()
        handle = transport.last
        handle.succeed()

        handle.receive(_state(working=True, office_location=True))
        assert indicator.current == GREEN

        handle.receive(_state(working=True, office_location=True, meeting=True).encode("utf-8"))
        assert indicator.current == RED

    def test_event_and_invalid_packets_leave_color(self, manager, transport, indicator):
        """Event packets and garbage are logged but do not change the colour."""
        app = LuxacastApp(manager, indicator)
        app.start()
        handle = transport.last
        handle.succeed()
        handle.receive(_state(working=True, office_location=True))

        handle.receive(json.dumps({"type": "event", "event": "doorbell"}))
        handle.receive("{broken")
        handle.receive(json.dumps({"type": ["state"], "state": {}}))

        assert indicator.current == GREEN

    def test_disconnect_shows_disconnected_color(self, manager, transport, indicator):
        """Losing the connection shows the disconnected colour."""
        app = LuxacastApp(manager, indicator)
        app.start()
        transport.last.succeed()

        transport.last.close(1006, "")

        assert indicator.current == DISCONNECTED

    def test_reconnect_clears_disconnected_color(self, manager, transport, indicator, fake_loop):
        """A new connection turns the indicator off until state arrives."""
        app = LuxacastApp(manager, indicator)
        app.start()
        transport.last.succeed()
        transport.last.close(1006, "")

        fake_loop.fire_next()
        transport.last.succeed()

        assert indicator.current == OFF
        assert len(transport.last.message_listeners) == 1

    def test_failed_attempt_keeps_indicator(self, manager, transport, indicator):
        """A connection that never opened does not show the disconnected colour."""
        app = LuxacastApp(manager, indicator)
        app.start()

        transport.last.fail()

        assert indicator.history == [OFF]

    def test_shutdown(self, manager, transport, indicator, fake_loop):
        """shutdown() closes the connection, stops reconnecting and turns off."""
        app = LuxacastApp(manager, indicator)
        app.start()
        handle = transport.last
        handle.succeed()
        handle.receive(_state(working=True, home_location=True, busy=True))

        app.shutdown()

        assert handle.terminate_calls == 1
        assert not manager.should_reconnect
        assert fake_loop.pending == []
        assert indicator.current == OFF

    def test_handle_without_messages(self, manager, indicator):
        """Handles that cannot deliver messages are tolerated."""
        from luxacast.events import ConnectionOpened

        LuxacastApp(manager, indicator)

        manager.events.publish(ConnectionOpened(handle=object()))

        assert indicator.current == OFF
