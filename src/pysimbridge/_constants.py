"""Internal constants shared across the library."""

from enum import IntEnum

HEADER_SIZE = 16
PROTOCOL_VERSION = 4


class MessageType(IntEnum):
    """Message type identifiers carried in the header ``type`` field."""

    OPEN = 0x0001
    CLOSE = 0x0002
    REQUEST_DATA = 0x0003
    SET_DATA_DEFINITION = 0x0004
    ADD_TO_DATA_DEFINITION = 0x0005
    SIM_OBJECT_DATA = 0x0100
    EXCEPTION = 0x0101


# ------------------------------------------------------------------
# Simulator-side handles for the position data definition
# ------------------------------------------------------------------

DEFINITION_ID_POSITION = 1
REQUEST_ID_POSITION = 1
OBJECT_ID_USER = 0  # SIMCONNECT_OBJECT_ID_USER

# ------------------------------------------------------------------
# Timing defaults (seconds)
# ------------------------------------------------------------------

DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_DIAL_TIMEOUT = 10.0
DEFAULT_STALE_THRESHOLD = 5.0
BACKOFF_INITIAL = 1.0
BACKOFF_MAX = 30.0
