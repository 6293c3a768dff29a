"""Websocket transport built on the ``websockets`` asyncio client."""

import asyncio
from typing import Any, Callable, Mapping, Optional, Union

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedError

from luxacast.logger import get_logger
from .transport import FailureCallback, SuccessCallback, TerminationCallback

logger = get_logger("connection.websocket")

# Close code reported when no close frame was received
ABNORMAL_CLOSURE = 1006

Frame = Union[str, bytes]
MessageListener = Callable[[Frame], None]


class WebSocketHandle:
    """A single websocket connection attempt and, if it succeeds, its session.

    The attempt starts as soon as the handle is created. It runs as a task on
    the event loop, so observers registered in the same loop turn never miss
    an event.

    Reported events:
    - success when the opening handshake completes
    - failure when the handshake fails, or when an open connection ends in error
    - termination (code, reason) whenever the handle is done, at most once

    A failed handshake reports failure followed by termination with code 1006.
    """

    def __init__(
        self,
        address: str,
        options: Optional[Mapping[str, Any]] = None,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize the handle and start connecting.

        Args:
            address: Websocket URI (ws:// or wss://)
            options: Extra keyword arguments for ``websockets.asyncio.client.connect``
            loop: Event loop running the connection (defaults to the running loop)
        """
        self._address = address
        # Keepalive is driven by the connection manager, not by websockets itself
        self._options: dict[str, Any] = {"ping_interval": None, **(options or {})}

        self._on_success: Optional[SuccessCallback] = None
        self._on_failure: Optional[FailureCallback] = None
        self._on_termination: Optional[TerminationCallback] = None
        self._message_listeners: list[MessageListener] = []

        self._connection: Optional[ClientConnection] = None
        self._settled = False
        self._terminated = False
        self._background: set[asyncio.Task] = set()

        self._loop = loop or asyncio.get_running_loop()
        self._task = self._loop.create_task(self._run(), name=f"websocket:{address}")

    @property
    def address(self) -> str:
        return self._address

    @property
    def connection(self) -> Optional[ClientConnection]:
        """Underlying websockets connection once the handshake succeeded."""
        return self._connection

    @property
    def is_terminated(self) -> bool:
        return self._terminated

    def observe(
        self,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
        on_termination: TerminationCallback,
    ) -> None:
        self._on_success = on_success
        self._on_failure = on_failure
        self._on_termination = on_termination

    def on_message(self, listener: MessageListener) -> None:
        """
        Register a listener for incoming frames.

        Args:
            listener: Synchronous callable receiving each frame (str or bytes)
        """
        if listener not in self._message_listeners:
            self._message_listeners.append(listener)

    def terminate(self) -> None:
        """Close the connection, or abandon the attempt if still connecting."""
        if self._terminated:
            return

        if self._connection is None:
            logger.debug(f"Abandoning connection attempt to {self._address}")
            self._task.cancel()
            return

        logger.debug(f"Closing connection to {self._address}")
        self._spawn(self._connection.close())

    def send_liveness_probe(self) -> None:
        """Send a websocket ping without waiting for the pong."""
        if self._connection is None or self._terminated:
            return

        self._spawn(self._ping(self._connection))

    async def wait_closed(self) -> None:
        """Wait until the handle has finished (terminated or abandoned)."""
        try:
            await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise

    async def _run(self) -> None:
        try:
            connection = await connect(self._address, **self._options)
        except asyncio.CancelledError:
            self._report_termination(ABNORMAL_CLOSURE, "Connection attempt abandoned")
            raise
        except Exception as e:
            logger.debug(f"Connection to {self._address} failed: {e!r}")
            self._report_failure(e)
            self._report_termination(ABNORMAL_CLOSURE, str(e))
            return

        self._connection = connection
        self._report_success()

        try:
            async for frame in connection:
                self._dispatch(frame)
        except ConnectionClosedError as e:
            # A close frame from the peer is a regular close, whatever its code
            if e.rcvd is None:
                self._report_failure(e)
        except asyncio.CancelledError:
            await connection.close()
            self._report_termination(connection.close_code or ABNORMAL_CLOSURE, connection.close_reason or "")
            raise

        self._report_termination(connection.close_code or ABNORMAL_CLOSURE, connection.close_reason or "")

    async def _ping(self, connection: ClientConnection) -> None:
        try:
            await connection.ping()
        except ConnectionClosed:
            logger.debug("Ping skipped: connection already closed")

    def _spawn(self, coro) -> None:
        task = self._loop.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    def _dispatch(self, frame: Frame) -> None:
        for listener in list(self._message_listeners):
            try:
                listener(frame)
            except Exception as e:
                logger.error(f"Error in message listener: {e}")

    def _report_success(self) -> None:
        if self._settled:
            return
        self._settled = True
        if self._on_success:
            self._on_success()

    def _report_failure(self, error: BaseException) -> None:
        # A failed handshake settles the handle; errors after success are reported as well
        self._settled = True
        if self._on_failure:
            self._on_failure(error)

    def _report_termination(self, code: int, reason: str) -> None:
        if self._terminated:
            return
        self._terminated = True
        if self._on_termination:
            self._on_termination(code, reason)


class WebSocketTransport:
    """Creates :class:`WebSocketHandle` instances."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def create(
        self,
        address: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> WebSocketHandle:
        return WebSocketHandle(address, options, loop=self._loop)
