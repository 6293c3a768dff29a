"""Command line entry point of the luxacast client."""

import asyncio
import signal
from typing import Optional

import typer
from pydantic import ValidationError

from luxacast.app import LuxacastApp
from luxacast.config import ClientConfig, load_config
from luxacast.connection import BackoffPolicy, ConnectionManager
from luxacast.errors import InvalidConfigurationError
from luxacast.indicator import ConsoleIndicator, Indicator
from luxacast.logger import get_logger, setup_logger

logger = get_logger("main")

# Seconds to wait for the socket to close on shutdown
SHUTDOWN_TIMEOUT = 5.0

cli = typer.Typer(
    name="luxacast",
    help="Show the presence state of a luxacast group on an indicator",
    epilog="""
    Examples:
    $ luxacast run --host ws://luxacast.local:8080 --group joris
    """,
    add_completion=False,
)


@cli.callback()
def main() -> None:
    """luxacast client."""


async def serve(
    config: ClientConfig,
    policy: Optional[BackoffPolicy] = None,
    indicator: Optional[Indicator] = None,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """
    Run the client until SIGINT/SIGTERM (or ``stop_event``) is received.

    Args:
        config: Client configuration
        policy: Backoff policy (built from ``config`` if None)
        indicator: Output indicator (console indicator if None)
        stop_event: Event ending the run when set
    """
    loop = asyncio.get_running_loop()
    stop = stop_event or asyncio.Event()

    manager = ConnectionManager(
        config.address,
        policy=policy or config.backoff_policy(),
        keepalive_interval=config.keepalive_interval,
    )
    app = LuxacastApp(manager, indicator or ConsoleIndicator(brightness=config.brightness))

    def _on_signal(name: str) -> None:
        logger.info(f"Received {name}")
        stop.set()

    def _on_raw_signal(signum, _frame) -> None:
        loop.call_soon_threadsafe(_on_signal, signal.Signals(signum).name)

    installed = []
    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _on_signal, sig.name)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            # Not supported by this event loop (e.g. on Windows)
            previous[sig] = signal.signal(sig, _on_raw_signal)

    logger.info(f"🚀 Starting luxacast client for {config.address}")
    app.start()

    try:
        await stop.wait()
    finally:
        handle = manager.connection
        app.shutdown()
        for sig in installed:
            loop.remove_signal_handler(sig)
        for sig, handler in previous.items():
            signal.signal(sig, handler)

        wait_closed = getattr(handle, "wait_closed", None)
        if wait_closed is not None:
            try:
                await asyncio.wait_for(wait_closed(), timeout=SHUTDOWN_TIMEOUT)
            except asyncio.TimeoutError:
                logger.warning("Connection did not close in time")

    logger.info("luxacast client stopped")


@cli.command()
def run(
    host: Optional[str] = typer.Option(None, "--host", help="Websocket base URL (env: LUXACAST_HOST)"),
    group: Optional[str] = typer.Option(None, "--group", help="Group to follow (env: LUXACAST_GROUP)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Connect to the server and keep the indicator up to date."""
    try:
        config = load_config(host=host, group=group, log_level="DEBUG" if debug else None)
        policy = config.backoff_policy()
    except (ValidationError, InvalidConfigurationError) as e:
        typer.echo(f"❌ Invalid configuration: {e}", err=True)
        raise typer.Exit(code=1)

    setup_logger(log_level=config.log_level.upper())
    asyncio.run(serve(config, policy=policy))


def run_cli() -> None:
    """Entry point for the luxacast console script."""
    cli()


if __name__ == "__main__":
    run_cli()
