from __future__ import annotations

import struct

import pytest

from pysimbridge.exceptions import InsufficientBytesError, UnknownVariableError, UnsupportedTypeError
from pysimbridge.simvars import (
    PLANE_BANK,
    PLANE_LATITUDE,
    POSITION_VARIABLES,
    NumericType,
    SimVarRegistry,
    VariableDef,
    decode_value,
)


def test_position_variables_fixed_order() -> None:
    assert [var.name for var in POSITION_VARIABLES] == [
        "PLANE LATITUDE",
        "PLANE LONGITUDE",
        "PLANE ALTITUDE",
        "PLANE ALT ABOVE GROUND",
        "PLANE HEADING DEGREES TRUE",
        "PLANE HEADING DEGREES MAGNETIC",
        "AIRSPEED INDICATED",
        "AIRSPEED TRUE",
        "GROUND VELOCITY",
        "VERTICAL SPEED",
        "PLANE PITCH DEGREES",
        "PLANE BANK DEGREES",
    ]
    assert all(var.numeric_type is NumericType.FLOAT64 and var.byte_size == 8 for var in POSITION_VARIABLES)
    assert POSITION_VARIABLES[0] is PLANE_LATITUDE
    assert POSITION_VARIABLES[-1] is PLANE_BANK


def test_units() -> None:
    units = {var.name: var.unit for var in POSITION_VARIABLES}
    assert units["PLANE ALTITUDE"] == "feet"
    assert units["AIRSPEED INDICATED"] == "knots"
    assert units["VERTICAL SPEED"] == "feet/minute"
    assert units["PLANE PITCH DEGREES"] == "degrees"


def test_registry_validate() -> None:
    registry = SimVarRegistry()

    assert len(registry) == 12
    assert registry.validate("PLANE LATITUDE") == PLANE_LATITUDE
    assert "GROUND VELOCITY" in registry
    assert registry.get("FUEL TOTAL QUANTITY") is None

    with pytest.raises(UnknownVariableError) as exc_info:
        registry.validate("FUEL TOTAL QUANTITY")
    assert exc_info.value.name == "FUEL TOTAL QUANTITY"


def test_registry_accepts_custom_variables() -> None:
    gear = VariableDef("GEAR HANDLE POSITION", "bool", NumericType.INT32, 4)
    registry = SimVarRegistry([gear])

    assert registry.validate("GEAR HANDLE POSITION") is gear
    assert "PLANE LATITUDE" not in registry


@pytest.mark.parametrize("value", [47.6062, -122.3321, 0.0])
def test_decode_float64(value: float) -> None:
    assert decode_value(struct.pack("<d", value), NumericType.FLOAT64) == value


@pytest.mark.parametrize(("raw", "expected"), [(1, 1), (0, 0), (0xFFFFFFFF, -1)])
def test_decode_int32_is_signed(raw: int, expected: int) -> None:
    assert decode_value(struct.pack("<I", raw), NumericType.INT32) == expected


def test_decode_uses_leading_bytes_only() -> None:
    data = struct.pack("<d", 1.5) + b"\xff" * 8
    assert decode_value(data, NumericType.FLOAT64) == 1.5


@pytest.mark.parametrize(
    ("data", "numeric_type"),
    [
        (b"\x00" * 4, NumericType.FLOAT64),
        (b"\x00" * 2, NumericType.INT32),
        (b"", NumericType.FLOAT64),
    ],
)
def test_decode_insufficient_bytes(data: bytes, numeric_type: NumericType) -> None:
    with pytest.raises(InsufficientBytesError):
        decode_value(data, numeric_type)


def test_decode_unsupported_type() -> None:
    with pytest.raises(UnsupportedTypeError):
        decode_value(b"\x00" * 16, 7)


def test_numeric_type_byte_size() -> None:
    assert NumericType.FLOAT64.byte_size == 8
    assert NumericType.INT32.byte_size == 4
