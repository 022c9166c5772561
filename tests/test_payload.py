from __future__ import annotations

import pytest
from conftest import SAMPLE_VALUES, pack_position

from pysimbridge._payload import POSITION_PAYLOAD_SIZE, parse_position_payload
from pysimbridge.exceptions import PayloadTooShortError
from pysimbridge.models.position import Position


def test_parse_position_payload_reproduces_values() -> None:
    pos = parse_position_payload(pack_position(SAMPLE_VALUES))

    assert pos.latitude == pytest.approx(47.6062, abs=1e-9)
    assert pos.longitude == pytest.approx(-122.3321, abs=1e-9)
    assert pos.altitude_msl == pytest.approx(35000.0, abs=1e-9)
    assert pos.altitude_agl == pytest.approx(34950.0, abs=1e-9)
    assert pos.heading_true == pytest.approx(270.0, abs=1e-9)
    assert pos.heading_magnetic == pytest.approx(268.5, abs=1e-9)
    assert pos.indicated_airspeed == pytest.approx(450.0, abs=1e-9)
    assert pos.true_airspeed == pytest.approx(455.0, abs=1e-9)
    assert pos.ground_speed == pytest.approx(448.0, abs=1e-9)
    assert pos.vertical_speed == pytest.approx(500.0, abs=1e-9)
    assert pos.pitch == pytest.approx(2.5, abs=1e-9)
    assert pos.bank == pytest.approx(-1.0, abs=1e-9)


def test_all_zero_payload_is_a_valid_zero_position() -> None:
    pos = parse_position_payload(bytes(96))

    assert pos == Position()
    assert all(value == 0.0 for value in pos.model_dump().values())


@pytest.mark.parametrize("length", [0, 50, 95])
def test_short_payload_raises(length: int) -> None:
    with pytest.raises(PayloadTooShortError) as exc_info:
        parse_position_payload(bytes(length))

    assert exc_info.value.expected == POSITION_PAYLOAD_SIZE == 96
    assert exc_info.value.actual == length


def test_trailing_bytes_are_ignored() -> None:
    pos = parse_position_payload(pack_position() + b"\x01\x02\x03")
    assert pos.bank == -1.0
