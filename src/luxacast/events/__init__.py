"""Connection notifications and the bus that delivers them."""

from .bus import EventBus
from .types import (
    ConnectionClosed,
    ConnectionFailed,
    ConnectionOpened,
    Event,
)

__all__ = [
    "EventBus",
    "Event",
    "ConnectionOpened",
    "ConnectionClosed",
    "ConnectionFailed",
]
