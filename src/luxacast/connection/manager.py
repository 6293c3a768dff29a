"""Connection manager keeping a single resilient connection alive."""

import asyncio
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from luxacast.events import (
    ConnectionClosed,
    ConnectionFailed,
    ConnectionOpened,
    EventBus,
)
from luxacast.logger import get_logger
from .backoff import BackoffPolicy
from .keepalive import KeepaliveTimer
from .scheduler import ReconnectScheduler
from .status import ConnectionStatus
from .transport import Transport, TransportHandle

logger = get_logger("connection.manager")

NOTIFICATIONS = {
    "opened": ConnectionOpened,
    "closed": ConnectionClosed,
    "error": ConnectionFailed,
}


class ConnectionManager:
    """
    Maintains one logical connection and re-establishes it after failures.

    This manager coordinates:
    - At most one live transport handle at a time
    - Keepalive probes while the connection is open
    - A reconnect cycle with exponential backoff after the connection is lost
    - ``opened``/``closed``/``error`` notifications for consumers

    ``activate()`` and ``deactivate()`` toggle the intent to stay connected
    without destroying the manager. Transport callbacks from a handle that has
    already been closed locally are ignored.
    """

    def __init__(
        self,
        address: str,
        transport_options: Optional[Mapping[str, Any]] = None,
        *,
        transport: Optional[Transport] = None,
        policy: Optional[BackoffPolicy] = None,
        keepalive_interval: float = 30.0,
        event_bus: Optional[EventBus] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize connection manager.

        Args:
            address: Endpoint the transport connects to
            transport_options: Options passed through to transport creation
            transport: Transport creating handles (defaults to websockets)
            policy: Backoff policy for reconnect delays (defaults to 1s..60s, x2)
            keepalive_interval: Seconds between liveness probes while connected
            event_bus: Event bus for notifications (created if not provided)
            loop: Event loop used for timers (defaults to the running loop)
        """
        self._address = address
        self._transport_options: Optional[Mapping[str, Any]] = (
            MappingProxyType(dict(transport_options)) if transport_options is not None else None
        )

        if transport is None:
            from .websocket import WebSocketTransport
            transport = WebSocketTransport(loop=loop)
        self._transport: Transport = transport

        self._policy = policy or BackoffPolicy()
        self._scheduler = ReconnectScheduler(self._policy, self.open, loop=loop)
        self._keepalive = KeepaliveTimer(keepalive_interval, loop=loop)
        self.events = event_bus or EventBus()

        self._handle: Optional[TransportHandle] = None
        self._should_reconnect = False
        self._connected = False

    @property
    def address(self) -> str:
        return self._address

    @property
    def policy(self) -> BackoffPolicy:
        return self._policy

    @property
    def scheduler(self) -> ReconnectScheduler:
        return self._scheduler

    @property
    def connection(self) -> Optional[TransportHandle]:
        """The current transport handle, if any."""
        return self._handle

    @property
    def should_reconnect(self) -> bool:
        """Whether we currently INTEND to stay connected."""
        return self._should_reconnect

    @property
    def is_connected(self) -> bool:
        """Whether there currently exists an open connection."""
        return self._connected

    @property
    def is_connecting(self) -> bool:
        """Whether a connection attempt is ongoing."""
        return not self._connected and self._handle is not None

    @property
    def is_reconnect_scheduled(self) -> bool:
        """Whether a reconnect attempt is armed."""
        return self._scheduler.is_scheduled

    @property
    def status(self) -> ConnectionStatus:
        """Get current connection status."""
        if self._connected:
            return ConnectionStatus.CONNECTED
        if self._handle is not None:
            return ConnectionStatus.CONNECTING
        if self._scheduler.is_active:
            return ConnectionStatus.RECONNECTING
        return ConnectionStatus.DISCONNECTED

    def on(self, name: str, handler: Callable[[Any], None]) -> None:
        """
        Register a handler for a named notification.

        Args:
            name: One of ``"opened"``, ``"closed"`` or ``"error"``
            handler: Synchronous callable receiving the event

        Raises:
            ValueError: If ``name`` is not a known notification
        """
        try:
            event_type = NOTIFICATIONS[name]
        except KeyError:
            raise ValueError(
                f"Unknown notification {name!r}; expected one of {', '.join(NOTIFICATIONS)}"
            ) from None

        self.events.subscribe(event_type, handler)

    def activate(self) -> None:
        """Start keeping the connection alive; no-op when already active."""
        if self._should_reconnect:
            return

        logger.info(f"Activating connection to {self._address}")
        self._should_reconnect = True
        self.open()

    def deactivate(self) -> None:
        """Close the connection and stop reconnecting; no-op when inactive."""
        if not self._should_reconnect:
            return

        logger.info(f"Deactivating connection to {self._address}")
        self._should_reconnect = False
        self._scheduler.stop()
        self.close()

    def open(self) -> None:
        """Start a connection attempt unless one is connecting or connected."""
        if self._handle is not None:
            return

        logger.debug(f"Opening connection to {self._address}")
        try:
            handle = self._transport.create(self._address, self._transport_options)
        except Exception as e:
            logger.warning(f"Could not create connection to {self._address}: {e}")
            if not self._scheduler.is_active:
                self.events.publish(ConnectionFailed(error=e))
            if self._should_reconnect:
                self._scheduler.start()
            return

        self._handle = handle

        handle.observe(
            on_success=lambda: self._on_success(handle),
            on_failure=lambda err: self._on_failure(handle, err),
            on_termination=lambda code, reason: self._on_termination(handle, code, reason),
        )

    def close(self) -> None:
        """Close the current connection or attempt, without waiting for the transport."""
        if self._handle is None:
            return

        handle = self._handle
        self._connected = False
        self._keepalive.stop()
        self._handle = None
        handle.terminate()

    def _on_success(self, handle: TransportHandle) -> None:
        if handle is not self._handle:
            logger.debug("Ignoring success from a stale handle")
            return

        logger.debug("onOpen()")
        self._connected = True
        # A successful connection ends the current reconnect cycle
        self._scheduler.stop()

        self.events.publish(ConnectionOpened(handle=handle))

        if self._handle is handle and self._connected:
            self._keepalive.start(handle.send_liveness_probe)

    def _on_failure(self, handle: TransportHandle, error: BaseException) -> None:
        if handle is not self._handle:
            logger.debug(f"Ignoring failure from a stale handle: {error}")
            return

        logger.debug(f"onError(): {error}")

        # The reconnect cycle already reports failure by retrying
        if not self._scheduler.is_active:
            self.events.publish(ConnectionFailed(error=error))

    def _on_termination(self, handle: TransportHandle, code: int, reason: str) -> None:
        if handle is not self._handle:
            logger.debug(f"Ignoring termination from a stale handle ({code})")
            return

        logger.debug(f"onClose(): code={code} reason={reason!r}")
        self._handle = None
        self._keepalive.stop()

        was_connected = self._connected
        self._connected = False

        # Only fire a close event when the connection had been opened
        if was_connected:
            self.events.publish(ConnectionClosed(code=code, reason=reason))

        if self._should_reconnect:
            self._scheduler.start()
