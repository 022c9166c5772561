"""Aircraft position model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Position(BaseModel):
    """Position, speed and attitude of the user aircraft.

    Field order matches the position data definition. A zeroed position is
    a valid reading, not "no data"; freshness is tracked by the state cache.

    Parameters
    ----------
    latitude, longitude : float
        Degrees.
    altitude_msl, altitude_agl : float
        Feet above mean sea level / above ground.
    heading_true, heading_magnetic : float
        Degrees.
    indicated_airspeed, true_airspeed, ground_speed : float
        Knots.
    vertical_speed : float
        Feet per minute.
    pitch, bank : float
        Degrees.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    latitude: float = 0.0
    longitude: float = 0.0
    altitude_msl: float = 0.0
    altitude_agl: float = 0.0
    heading_true: float = 0.0
    heading_magnetic: float = 0.0
    indicated_airspeed: float = 0.0
    true_airspeed: float = 0.0
    ground_speed: float = 0.0
    vertical_speed: float = 0.0
    pitch: float = 0.0
    bank: float = 0.0


class CachedState(BaseModel):
    """Last known position and when it was received."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    position: Position
    received_at: datetime
    received_monotonic: float
