"""Resilient connection management: backoff, reconnect scheduling, keepalive."""

from .backoff import BackoffPolicy
from .keepalive import KeepaliveTimer
from .manager import ConnectionManager
from .scheduler import ReconnectScheduler
from .status import ConnectionStatus
from .transport import Transport, TransportHandle
from .websocket import WebSocketHandle, WebSocketTransport

__all__ = [
    "BackoffPolicy",
    "ReconnectScheduler",
    "KeepaliveTimer",
    "ConnectionManager",
    "ConnectionStatus",
    "Transport",
    "TransportHandle",
    "WebSocketHandle",
    "WebSocketTransport",
]
