"""Output indicators rendering the current colour."""

import re
from typing import Optional, Protocol

from rich.console import Console
from rich.text import Text

from luxacast.logger import get_logger
from luxacast.rules import OFF

logger = get_logger("indicator")

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class Indicator(Protocol):
    """Something that can show a colour."""

    def color(self, value: str) -> None:
        ...

    def off(self) -> None:
        ...


def normalize_color(value: str) -> str:
    """
    Expand a hex colour to the ``#rrggbb`` form.

    Args:
        value: ``#rgb`` or ``#rrggbb`` (leading ``#`` optional)

    Returns:
        Lower-case ``#rrggbb`` string

    Raises:
        ValueError: If ``value`` is not a hex colour
    """
    match = _HEX_COLOR.match(value.strip())
    if not match:
        raise ValueError(f"Not a hex colour: {value!r}")

    digits = match.group(1).lower()
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return f"#{digits}"


class ConsoleIndicator:
    """Renders the indicator colour as a block on the terminal."""

    def __init__(self, console: Optional[Console] = None, brightness: float = 0.1):
        """
        Initialize console indicator.

        Args:
            console: Rich console to draw on (defaults to stdout)
            brightness: Brightness (0..1) reported alongside the colour
        """
        if not 0 <= brightness <= 1:
            raise ValueError(f"Brightness must be between 0 and 1 (got {brightness})")

        self._console = console or Console()
        self._brightness = brightness
        self._current: Optional[str] = None

    @property
    def current(self) -> Optional[str]:
        """Last colour shown, or None if nothing was shown yet."""
        return self._current

    def color(self, value: str) -> None:
        rgb = normalize_color(value)
        if rgb == self._current:
            return

        self._current = rgb
        label = "off" if rgb == normalize_color(OFF) else rgb
        logger.debug(f"Indicator -> {label}")

        line = Text("    ", style=f"on {rgb}")
        line.append(f" {label} ({self._brightness:.0%})")
        self._console.print(line)

    def off(self) -> None:
        self.color(OFF)
