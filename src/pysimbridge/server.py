"""FastMCP tool layer exposing the cached aircraft position.

Tool handlers only read the state cache; they never touch the simulator
connection. Every result carries one JSON text document. Failures set the
result's ``isError`` flag and describe the problem in the body
(``available: false`` plus a stable ``code``).
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Annotated, Protocol

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent
from pydantic import BaseModel, Field

from pysimbridge.exceptions import NotConnectedError, StaleDataError
from pysimbridge.models.position import Position

_logger = logging.getLogger(__name__)

SERVER_NAME = "flightsim-mcp"
TOOL_NAME = "get_aircraft_position"


class PositionSource(Protocol):
    def get_position(self) -> Position: ...


class AircraftPositionResponse(BaseModel):
    latitude: float
    longitude: float
    altitude_msl_ft: float
    altitude_agl_ft: float
    heading_true_deg: float
    heading_mag_deg: float
    indicated_speed_kts: float
    true_speed_kts: float
    ground_speed_kts: float
    vertical_speed_fpm: float
    pitch_deg: float | None = None
    bank_deg: float | None = None
    timestamp: str


class SimulatorUnavailableResponse(BaseModel):
    available: bool = False
    error: str
    code: str
    recoverable: bool
    suggestion: str
    timestamp: str


def _timestamp() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def position_response(position: Position, *, include_attitude: bool = False) -> AircraftPositionResponse:
    return AircraftPositionResponse(
        latitude=position.latitude,
        longitude=position.longitude,
        altitude_msl_ft=position.altitude_msl,
        altitude_agl_ft=position.altitude_agl,
        heading_true_deg=position.heading_true,
        heading_mag_deg=position.heading_magnetic,
        indicated_speed_kts=position.indicated_airspeed,
        true_speed_kts=position.true_airspeed,
        ground_speed_kts=position.ground_speed,
        vertical_speed_fpm=position.vertical_speed,
        pitch_deg=position.pitch if include_attitude else None,
        bank_deg=position.bank if include_attitude else None,
        timestamp=_timestamp(),
    )


def error_response(exc: Exception) -> SimulatorUnavailableResponse:
    """Map an internal error to its user-facing code."""
    if isinstance(exc, StaleDataError):
        code, recoverable, suggestion = "DATA_STALE", True, "Wait for the simulator to send fresh data."
    elif isinstance(exc, NotConnectedError):
        code, recoverable, suggestion = (
            "SIMULATOR_NOT_CONNECTED",
            True,
            "Ensure Microsoft Flight Simulator is running.",
        )
    else:
        code, recoverable, suggestion = "UNKNOWN_ERROR", False, "Check application logs for details."
    return SimulatorUnavailableResponse(
        error=str(exc),
        code=code,
        recoverable=recoverable,
        suggestion=suggestion,
        timestamp=_timestamp(),
    )


def _text_result(text: str, *, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def get_aircraft_position_result(source: PositionSource, *, include_attitude: bool = False) -> CallToolResult:
    """Build the tool result from the current cache contents."""
    try:
        position = source.get_position()
    except Exception as exc:
        if not isinstance(exc, (StaleDataError, NotConnectedError)):
            _logger.error("Unexpected error reading position", exc_info=True)
        return _text_result(error_response(exc).model_dump_json(), is_error=True)
    response = position_response(position, include_attitude=include_attitude)
    return _text_result(response.model_dump_json(exclude_none=True))


def create_server(source: PositionSource, *, name: str = SERVER_NAME) -> FastMCP:
    """Create a FastMCP server with the position tool bound to *source*."""
    mcp = FastMCP(name)

    @mcp.tool(name=TOOL_NAME, structured_output=False)
    async def get_aircraft_position(
        include_attitude: Annotated[
            bool,
            Field(description="Also return pitch and bank angles in degrees"),
        ] = False,
    ) -> CallToolResult:
        """Returns live aircraft position, speed, and attitude data from Microsoft Flight Simulator 2024."""
        return get_aircraft_position_result(source, include_attitude=include_attitude)

    return mcp
