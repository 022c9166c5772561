"""Decoding of ``SIM_OBJECT_DATA`` payloads for the position definition."""

from __future__ import annotations

from pysimbridge.exceptions import PayloadTooShortError
from pysimbridge.models.position import Position
from pysimbridge.simvars import POSITION_VARIABLES, decode_value

POSITION_PAYLOAD_SIZE = sum(var.byte_size for var in POSITION_VARIABLES)  # 12 * 8

# Position fields in slot order; zipped against POSITION_VARIABLES.
_POSITION_FIELDS: tuple[str, ...] = tuple(Position.model_fields)


def parse_position_payload(data: bytes) -> Position:
    """Decode a packed position payload into a :class:`Position`.

    Slot ``i`` is read at offset ``i * 8``. All-or-nothing: a short buffer
    raises :class:`PayloadTooShortError` without decoding anything.
    """
    if len(data) < POSITION_PAYLOAD_SIZE:
        raise PayloadTooShortError(
            f"payload too short: got {len(data)} bytes, need {POSITION_PAYLOAD_SIZE}",
            expected=POSITION_PAYLOAD_SIZE,
            actual=len(data),
        )

    values: dict[str, float] = {}
    offset = 0
    for field_name, var in zip(_POSITION_FIELDS, POSITION_VARIABLES, strict=True):
        values[field_name] = float(decode_value(data[offset : offset + var.byte_size], var.numeric_type))
        offset += var.byte_size
    return Position(**values)
