"""Keepalive probing for open connections."""

import asyncio
from typing import Callable, Optional

from luxacast.logger import get_logger

logger = get_logger("connection.keepalive")


class KeepaliveTimer:
    """Sends a liveness probe on a fixed interval while a connection is open.

    Probing is independent of message traffic: a probe goes out every
    ``interval`` seconds until :meth:`stop` is called. Start and stop are
    synchronous so they can be called straight from transport callbacks.
    """

    def __init__(
        self,
        interval: float = 30.0,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize keepalive timer.

        Args:
            interval: Seconds between liveness probes
            loop: Event loop used for timers (defaults to the running loop)
        """
        if interval <= 0:
            raise ValueError(f"Keepalive interval must be positive (got {interval})")

        self._interval = interval
        self._loop = loop
        self._probe: Optional[Callable[[], None]] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        """Check if keepalive probing is active."""
        return self._probe is not None

    def start(self, probe: Callable[[], None]) -> None:
        """
        Start probing.

        Args:
            probe: Callable sending one liveness probe
        """
        if self.is_running:
            logger.warning("Keepalive already running")
            return

        self._probe = probe
        self._arm()
        logger.debug(f"Keepalive started (interval={self._interval}s)")

    def stop(self) -> None:
        """Stop probing; safe to call when not running."""
        if not self.is_running:
            return

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._probe = None
        logger.debug("Keepalive stopped")

    def _arm(self) -> None:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._timer = self._loop.call_later(self._interval, self._tick)

    def _tick(self) -> None:
        probe = self._probe
        if probe is None:
            return

        try:
            probe()
        except Exception as e:
            logger.warning(f"Keepalive probe failed: {e}")

        # The probe may have triggered stop()
        if self._probe is probe:
            self._arm()
