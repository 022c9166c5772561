"""Simulation variable catalog and typed value decoding.

The position data definition is a fixed, ordered set of twelve variables.
Their order in :data:`POSITION_VARIABLES` is the byte layout of every
``SIM_OBJECT_DATA`` payload for that definition, so it must never change.
"""

from __future__ import annotations

import enum
import struct
from collections.abc import Iterable
from dataclasses import dataclass

from pysimbridge.exceptions import InsufficientBytesError, UnknownVariableError, UnsupportedTypeError


class NumericType(enum.IntEnum):
    """Wire numeric types. The member value is the tag sent to the simulator."""

    FLOAT64 = 0
    INT32 = 1

    @property
    def byte_size(self) -> int:
        return _DECODERS[self].size


# Closed variant: every NumericType has exactly one decoder with a fixed width.
_DECODERS: dict[NumericType, struct.Struct] = {
    NumericType.FLOAT64: struct.Struct("<d"),
    NumericType.INT32: struct.Struct("<i"),
}


@dataclass(frozen=True)
class VariableDef:
    """A named, unit-tagged simulation variable."""

    name: str
    unit: str
    numeric_type: NumericType = NumericType.FLOAT64
    byte_size: int = 8


PLANE_LATITUDE = VariableDef("PLANE LATITUDE", "degrees")
PLANE_LONGITUDE = VariableDef("PLANE LONGITUDE", "degrees")
PLANE_ALTITUDE = VariableDef("PLANE ALTITUDE", "feet")
PLANE_ALT_ABOVE_GROUND = VariableDef("PLANE ALT ABOVE GROUND", "feet")
PLANE_HEADING_TRUE = VariableDef("PLANE HEADING DEGREES TRUE", "degrees")
PLANE_HEADING_MAGNETIC = VariableDef("PLANE HEADING DEGREES MAGNETIC", "degrees")
AIRSPEED_INDICATED = VariableDef("AIRSPEED INDICATED", "knots")
AIRSPEED_TRUE = VariableDef("AIRSPEED TRUE", "knots")
GROUND_VELOCITY = VariableDef("GROUND VELOCITY", "knots")
VERTICAL_SPEED = VariableDef("VERTICAL SPEED", "feet/minute")
PLANE_PITCH = VariableDef("PLANE PITCH DEGREES", "degrees")
PLANE_BANK = VariableDef("PLANE BANK DEGREES", "degrees")

POSITION_VARIABLES: tuple[VariableDef, ...] = (
    PLANE_LATITUDE,
    PLANE_LONGITUDE,
    PLANE_ALTITUDE,
    PLANE_ALT_ABOVE_GROUND,
    PLANE_HEADING_TRUE,
    PLANE_HEADING_MAGNETIC,
    AIRSPEED_INDICATED,
    AIRSPEED_TRUE,
    GROUND_VELOCITY,
    VERTICAL_SPEED,
    PLANE_PITCH,
    PLANE_BANK,
)
"""Position data definition, in payload order (slot ``i`` at offset ``i * 8``)."""


class SimVarRegistry:
    """Allowlist of simulation variables that may be registered."""

    def __init__(self, variables: Iterable[VariableDef] = POSITION_VARIABLES) -> None:
        self._vars: dict[str, VariableDef] = {var.name: var for var in variables}

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def get(self, name: str) -> VariableDef | None:
        return self._vars.get(name)

    def validate(self, name: str) -> VariableDef:
        """Return the definition for *name*, or raise :class:`UnknownVariableError`."""
        var = self._vars.get(name)
        if var is None:
            raise UnknownVariableError(name)
        return var


def decode_value(data: bytes, numeric_type: NumericType | int) -> float | int:
    """Decode one little-endian value of *numeric_type* from the start of *data*.

    Raises
    ------
    UnsupportedTypeError
        The tag is not a known :class:`NumericType`.
    InsufficientBytesError
        *data* is shorter than the type's fixed width.
    """
    try:
        kind = NumericType(numeric_type)
    except ValueError as exc:
        raise UnsupportedTypeError(f"unsupported data type: {numeric_type}") from exc

    decoder = _DECODERS[kind]
    if len(data) < decoder.size:
        raise InsufficientBytesError(f"{kind.name.lower()} requires {decoder.size} bytes, got {len(data)}")
    value: float | int = decoder.unpack_from(data)[0]
    return value


DEFAULT_REGISTRY = SimVarRegistry()
"""Allowlist consulted before any variable is registered with the simulator."""
