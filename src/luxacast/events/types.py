"""Event types published by the connection manager.

Every notification is a dataclass so subscribers get a typed payload.
"""

import time
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Event:
    """Base class for all events.

    The timestamp field is automatically set when the event is created.
    """

    timestamp: float = field(default_factory=time.time, init=False)
    """Timestamp when the event was created (Unix timestamp)."""


@dataclass
class ConnectionOpened(Event):
    """Published once per successful connection.

    Attributes:
        handle: Transport handle of the connection that just opened
    """

    handle: Any
    """The live transport handle."""


@dataclass
class ConnectionClosed(Event):
    """Published once per connection that was open and is now closed.

    Attempts that never opened do not produce this event.

    Attributes:
        code: Close code reported by the transport
        reason: Close reason reported by the transport
    """

    code: int
    """Close code."""
    reason: str = ""
    """Close reason."""


@dataclass
class ConnectionFailed(Event):
    """Published for connection failures not masked by an active reconnect cycle."""

    error: BaseException
    """The failure reported by the transport."""
