"""Synchronous publish/subscribe of connection notifications.

Handlers run inline, inside the transport callback that produced the event,
so they must not be coroutine functions. A handler wanting to do async work
schedules it with ``asyncio.create_task()``.
"""

import inspect
from typing import Callable, Type, TypeVar

from luxacast.logger import get_logger

from .types import Event

logger = get_logger("events.bus")

E = TypeVar("E", bound=Event)


class EventBus:
    """Routes each published event to the handlers registered for its type.

    Delivery follows registration order. A handler registered twice for the
    same type is called once. Not thread-safe: publish from the loop thread.
    """

    def __init__(self):
        self._handlers: dict[Type[Event], list[Callable[[Event], None]]] = {}

    def subscribe(self, event_type: Type[E], handler: Callable[[E], None]) -> None:
        """
        Register ``handler`` for events of exactly ``event_type``.

        Raises:
            TypeError: If handler is a coroutine function
        """
        if inspect.iscoroutinefunction(handler):
            name = getattr(handler, "__name__", repr(handler))
            raise TypeError(
                f"{name} is async; event handlers must be synchronous functions"
            )

        registered = self._handlers.setdefault(event_type, [])
        if handler in registered:
            return
        registered.append(handler)
        logger.debug(f"{event_type.__name__}: {len(registered)} handler(s)")

    def publish(self, event: Event) -> None:
        """Call every handler of ``type(event)``; handler errors are logged."""
        # Copy so handlers may subscribe while we iterate
        for handler in list(self._handlers.get(type(event), ())):
            try:
                handler(event)
            except Exception as e:
                logger.opt(exception=e).error(
                    f"{type(event).__name__} handler {getattr(handler, '__name__', handler)!r} failed: {e}"
                )
