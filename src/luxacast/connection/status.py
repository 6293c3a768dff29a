"""Connection status of a manager."""

from enum import Enum

__all__ = ["ConnectionStatus"]


class ConnectionStatus(Enum):
    """Where a connection manager is in its lifecycle.

    RECONNECTING means no transport is live but a reconnect cycle is driving
    new attempts.
    """

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
