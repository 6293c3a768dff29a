"""luxacast: keep an indicator in sync with a luxacast server over a resilient websocket."""

from luxacast.connection import (
    BackoffPolicy,
    ConnectionManager,
    ConnectionStatus,
    ReconnectScheduler,
)
from luxacast.events import ConnectionClosed, ConnectionFailed, ConnectionOpened, EventBus

__version__ = "0.1.0"

__all__ = [
    "BackoffPolicy",
    "ConnectionManager",
    "ConnectionStatus",
    "ReconnectScheduler",
    "EventBus",
    "ConnectionOpened",
    "ConnectionClosed",
    "ConnectionFailed",
]
