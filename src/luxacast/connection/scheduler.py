"""Reconnect scheduler driving repeated connection attempts."""

import asyncio
from typing import Any, Callable, Optional

from luxacast.logger import get_logger
from .backoff import BackoffPolicy

logger = get_logger("connection.scheduler")


class ReconnectScheduler:
    """Owns the single pending reconnect timer of a connection.

    A reconnect cycle starts with :meth:`start` and keeps firing attempts with
    growing delays until :meth:`stop` is called. The next attempt is always
    queued before the outcome of the current one is known: connection
    establishment is asynchronous, so a successful open ends the cycle by
    calling :meth:`stop` from the outside.

    Timers are armed through ``loop.call_later``; any object offering that
    method (returning a handle with ``cancel()``) can stand in for the loop.
    """

    def __init__(
        self,
        policy: BackoffPolicy,
        attempt: Callable[[], Any],
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize reconnect scheduler.

        Args:
            policy: Backoff policy computing the delay between attempts
            attempt: Callback performing a single connection attempt
            loop: Event loop used for timers (defaults to the running loop)
        """
        self._policy = policy
        self._attempt = attempt
        self._loop = loop
        self._active = False
        self._current_delay = policy.reset()
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def is_active(self) -> bool:
        """Whether a reconnect cycle is in progress."""
        return self._active

    @property
    def is_scheduled(self) -> bool:
        """Whether an attempt is armed but has not fired yet."""
        return self._timer is not None

    @property
    def current_delay(self) -> float:
        """Delay that the next scheduled attempt will use."""
        return self._current_delay

    def start(self) -> None:
        """Begin a reconnect cycle; does nothing if one is already running."""
        if self._active:
            return

        self._active = True
        self._current_delay = self._policy.reset()
        logger.debug(f"Reconnect cycle started (first attempt in {self._current_delay:.1f}s)")
        self.schedule_next()

    def schedule_next(self) -> None:
        """Arm the timer for the next attempt and advance the delay."""
        if not self._active:
            return

        delay = self._current_delay
        self._timer = self._get_loop().call_later(delay, self._fire)
        self._current_delay = self._policy.next(delay)
        logger.info(f"Reconnecting in {delay:.1f}s...")

    def stop(self) -> None:
        """
        Stop the reconnect cycle and cancel the pending timer, if any.

        Note:
            An attempt that has already been started is not interrupted; only
            new attempts are prevented from being scheduled.
        """
        self._active = False
        logger.debug("stop()")

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        # Cancellation and delivery of an already fired timer can interleave
        if not self._active:
            return

        self._timer = None
        try:
            self._attempt()
        except Exception as e:
            logger.error(f"Reconnect attempt raised: {e}")

        self.schedule_next()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop
