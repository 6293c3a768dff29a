"""Shared fakes for connection tests.

The connection code only needs ``call_later`` from the event loop and
``create`` from the transport, so both are replaced with deterministic fakes:
time advances only when a test says so.
"""

from typing import Any, Callable, Optional

import pytest

from luxacast.connection import BackoffPolicy, ConnectionManager


class FakeTimer:
    """Timer handle returned by FakeLoop.call_later."""

    def __init__(self, when: float, delay: float, callback: Callable[..., Any], args: tuple):
        self.when = when
        self.delay = delay
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    @property
    def owner(self) -> Any:
        return getattr(self.callback, "__self__", None)

    def cancel(self) -> None:
        self.cancelled = True


class FakeLoop:
    """Manually driven replacement for the parts of asyncio's loop we use."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeTimer:
        timer = FakeTimer(self.now + delay, delay, callback, args)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def delays_for(self, owner: Any) -> list[float]:
        """Delays of every timer armed by ``owner`` (cancelled ones included)."""
        return [t.delay for t in self.timers if t.owner is owner]

    def fire_next(self) -> Optional[FakeTimer]:
        """Jump to the earliest pending timer and run it."""
        pending = self.pending
        if not pending:
            return None

        timer = min(pending, key=lambda t: t.when)
        self.now = max(self.now, timer.when)
        timer.fired = True
        timer.callback(*timer.args)
        return timer

    def advance(self, seconds: float) -> None:
        """Move time forward, running every timer that falls due."""
        target = self.now + seconds
        while True:
            due = [t for t in self.pending if t.when <= target]
            if not due:
                break
            self.fire_next()
        self.now = target


class FakeHandle:
    """Transport handle whose lifecycle is driven by the test."""

    def __init__(self, address: str, options: Any = None):
        self.address = address
        self.options = options
        self.terminate_calls = 0
        self.probes = 0
        self.message_listeners: list[Callable[[Any], None]] = []
        self._on_success = None
        self._on_failure = None
        self._on_termination = None

    def observe(self, on_success, on_failure, on_termination) -> None:
        self._on_success = on_success
        self._on_failure = on_failure
        self._on_termination = on_termination

    def terminate(self) -> None:
        self.terminate_calls += 1

    def send_liveness_probe(self) -> None:
        self.probes += 1

    def on_message(self, listener: Callable[[Any], None]) -> None:
        self.message_listeners.append(listener)

    # Test drivers

    def succeed(self) -> None:
        self._on_success()

    def fail(self, error: Optional[BaseException] = None) -> None:
        """Report a failed attempt the way a websocket does: error, then close."""
        self._on_failure(error or ConnectionRefusedError("Connection refused"))
        self._on_termination(1006, "")

    def error(self, error: Optional[BaseException] = None) -> None:
        self._on_failure(error or ConnectionResetError("Connection reset"))

    def close(self, code: int = 1000, reason: str = "") -> None:
        self._on_termination(code, reason)

    def receive(self, frame: Any) -> None:
        for listener in list(self.message_listeners):
            listener(frame)


class FakeTransport:
    """Transport recording every handle it creates."""

    def __init__(self):
        self.handles: list[FakeHandle] = []

    def create(self, address: str, options: Any = None) -> FakeHandle:
        handle = FakeHandle(address, options)
        self.handles.append(handle)
        return handle

    @property
    def last(self) -> FakeHandle:
        return self.handles[-1]


class EventRecorder:
    """Collects the notifications of a connection manager in order."""

    def __init__(self, manager: ConnectionManager):
        self.events: list[tuple[str, Any]] = []
        manager.on("opened", lambda e: self.events.append(("opened", e)))
        manager.on("closed", lambda e: self.events.append(("closed", e)))
        manager.on("error", lambda e: self.events.append(("error", e)))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def of(self, name: str) -> list[Any]:
        return [event for n, event in self.events if n == name]


class RecordingIndicator:
    """Indicator keeping the history of colours it was asked to show."""

    def __init__(self):
        self.history: list[str] = []

    @property
    def current(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def color(self, value: str) -> None:
        self.history.append(value)

    def off(self) -> None:
        self.history.append("#000")


@pytest.fixture
def fake_loop() -> FakeLoop:
    return FakeLoop()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def manager(fake_loop: FakeLoop, transport: FakeTransport) -> ConnectionManager:
    return ConnectionManager(
        "ws://localhost:8080/joris",
        {"open_timeout": 10},
        transport=transport,
        policy=BackoffPolicy(min_delay=1.0, max_delay=60.0, multiplier=2.0),
        keepalive_interval=30.0,
        loop=fake_loop,  # type: ignore[arg-type]
    )


@pytest.fixture
def recorder(manager: ConnectionManager) -> EventRecorder:
    return EventRecorder(manager)


@pytest.fixture
def indicator() -> RecordingIndicator:
    return RecordingIndicator()
