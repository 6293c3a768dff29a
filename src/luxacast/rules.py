"""Rules mapping a presence state to an indicator colour."""

from typing import Mapping

OFF = "#000"
RED = "#f00"
GREEN = "#0f0"
ORANGE = "#f40"
CYAN = "#0ff"

# Shown while the connection to the server is lost
DISCONNECTED = "#f80"


def on_state(state: Mapping[str, bool]) -> str:
    """
    Pick the indicator colour for a presence state.

    Missing flags count as false.

    Args:
        state: Presence flags published by the server

    Returns:
        Hex colour string
    """
    def flag(name: str) -> bool:
        return bool(state.get(name, False))

    if not flag("working") or not (flag("office_location") or flag("home_location")):
        return OFF

    # If we are occupied.
    if flag("meeting") or flag("calling") or flag("busy"):
        return RED

    if flag("away"):
        return ORANGE

    # In the office we stay GREEN whether or not we are at the computer.
    if flag("office_location"):
        return GREEN

    if flag("home_location"):
        return CYAN

    return OFF
