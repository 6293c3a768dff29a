"""Transport protocols consumed by the connection manager."""

from typing import Any, Callable, Mapping, Optional, Protocol

__all__ = [
    "SuccessCallback",
    "FailureCallback",
    "TerminationCallback",
    "TransportHandle",
    "Transport",
]

SuccessCallback = Callable[[], None]
FailureCallback = Callable[[BaseException], None]
TerminationCallback = Callable[[int, str], None]


class TransportHandle(Protocol):
    """One connection attempt/session.

    After creation a handle reports exactly one of success or failure, and at
    most one termination. A handle is never reused once it has terminated.
    """

    def observe(
        self,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
        on_termination: TerminationCallback,
    ) -> None:
        """Register the lifecycle observers of this handle."""
        ...

    def terminate(self) -> None:
        """Request the connection to close (or the pending attempt to be abandoned)."""
        ...

    def send_liveness_probe(self) -> None:
        """Send a keepalive probe over the open connection."""
        ...


class Transport(Protocol):
    """Factory for transport handles."""

    def create(
        self,
        address: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> TransportHandle:
        """Start a connection attempt to ``address`` and return its handle."""
        ...
