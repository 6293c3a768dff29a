"""Application wiring: connection notifications -> packets -> indicator colour."""

import json
from typing import Union

from luxacast.connection import ConnectionManager
from luxacast.errors import InvalidPacketError
from luxacast.events import ConnectionClosed, ConnectionFailed, ConnectionOpened
from luxacast.indicator import Indicator
from luxacast.logger import get_logger
from luxacast.packet import EventPacket, StatePacket, parse_packet
from luxacast.rules import DISCONNECTED, on_state

logger = get_logger("app")


class LuxacastApp:
    """
    Reflects the state published by the server on an indicator.

    Responsibilities:
    - Keep the connection alive through the connection manager
    - Decode incoming packets and map state packets to a colour
    - Show the disconnected colour while the connection is lost
    - Turn the indicator off on shutdown
    """

    def __init__(self, manager: ConnectionManager, indicator: Indicator):
        """
        Initialize the application.

        Args:
            manager: Connection manager for the group channel
            indicator: Output device showing the colour
        """
        self._manager = manager
        self._indicator = indicator

        manager.events.subscribe(ConnectionOpened, self._handle_opened)
        manager.events.subscribe(ConnectionClosed, self._handle_closed)
        manager.events.subscribe(ConnectionFailed, self._handle_error)

    @property
    def manager(self) -> ConnectionManager:
        return self._manager

    def start(self) -> None:
        """Turn the indicator off and start connecting."""
        self._indicator.off()
        self._manager.activate()

    def shutdown(self) -> None:
        """Close the connection, stop reconnecting and turn the indicator off."""
        logger.info("Shutting down")
        self._manager.deactivate()
        self._indicator.off()

    def handle_frame(self, raw: Union[str, bytes]) -> None:
        """
        Process one frame received from the server.

        Args:
            raw: Frame payload
        """
        try:
            packet = parse_packet(raw)
        except InvalidPacketError as e:
            logger.error(f"Not a valid packet: {e}")
            return

        if isinstance(packet, StatePacket):
            logger.info(f"State updated: {json.dumps(packet.state, indent=4)}")
            self._indicator.color(on_state(packet.state))
        elif isinstance(packet, EventPacket):
            logger.warning(f"Got event packet: {packet.model_dump_json(indent=4)}")

    def _handle_opened(self, event: ConnectionOpened) -> None:
        logger.info("Connected")
        self._indicator.off()

        on_message = getattr(event.handle, "on_message", None)
        if on_message is None:
            logger.warning(f"Transport handle {type(event.handle).__name__} does not deliver messages")
            return
        on_message(self.handle_frame)

    def _handle_closed(self, event: ConnectionClosed) -> None:
        logger.info(f"Disconnected (code={event.code}, reason={event.reason!r})")
        self._indicator.color(DISCONNECTED)

    def _handle_error(self, event: ConnectionFailed) -> None:
        logger.error(f"Error: {event.error}")
