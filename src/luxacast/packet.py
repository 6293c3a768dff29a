"""Decoding of frames received from the luxacast server.

Two packet shapes exist on the wire:

    {"type": "state", "state": {"working": true, "office_location": true, ...}}
    {"type": "event", "event": "doorbell", "data": {...}}
"""

import json
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from luxacast.errors import InvalidPacketError


class StatePacket(BaseModel):
    """Snapshot of the presence state flags of a group."""

    model_config = ConfigDict(frozen=True)

    type: Literal["state"] = "state"
    state: dict[str, bool] = Field(..., description="Presence flags, e.g. working, meeting, away")


class EventPacket(BaseModel):
    """One-off event broadcast to the group."""

    model_config = ConfigDict(frozen=True)

    type: Literal["event"] = "event"
    event: str = Field(..., description="Name of the event")
    data: dict[str, Any] = Field(default_factory=dict, description="Event payload")


Packet = Union[StatePacket, EventPacket]

_PACKET_TYPES: dict[str, type[BaseModel]] = {
    "state": StatePacket,
    "event": EventPacket,
}


def parse_packet(raw: Union[str, bytes]) -> Packet:
    """
    Parse a raw websocket frame into a typed packet.

    Args:
        raw: Frame payload (UTF-8 JSON text or bytes)

    Returns:
        StatePacket or EventPacket

    Raises:
        InvalidPacketError: If the frame is not JSON or not a known packet shape
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidPacketError(f"Frame is not valid UTF-8: {e}", raw) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidPacketError(f"Frame is not valid JSON: {e}", raw) from e

    if not isinstance(data, dict):
        raise InvalidPacketError(f"Expected a JSON object, got {type(data).__name__}", data)

    packet_type = data.get("type")
    model = _PACKET_TYPES.get(packet_type) if isinstance(packet_type, str) else None
    if model is None:
        raise InvalidPacketError(f"Unknown packet type: {packet_type!r}", data)

    try:
        return model.model_validate(data)  # type: ignore[return-value]
    except ValidationError as e:
        raise InvalidPacketError(f"Invalid {data['type']} packet: {e}", data) from e
