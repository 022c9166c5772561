"""pysimbridge - Async bridge from a flight simulator's binary TCP protocol to MCP tools."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysimbridge")
except PackageNotFoundError:
    __version__ = "0+local"
from pysimbridge.client import BridgeState, SimBridge
from pysimbridge.config import BridgeConfig
from pysimbridge.connection import ConnectionState, SimConnection
from pysimbridge.exceptions import (
    BridgeCancelledError,
    DialFailedError,
    HandshakeFailedError,
    InsufficientBytesError,
    MalformedHeaderError,
    NotConnectedError,
    PayloadTooShortError,
    ReadFailedError,
    SimBridgeError,
    SimCodecError,
    SimConnectionError,
    StaleDataError,
    UnknownVariableError,
    UnsupportedTypeError,
    WriteFailedError,
)
from pysimbridge.models import CachedState, Position
from pysimbridge.poller import Poller
from pysimbridge.simvars import POSITION_VARIABLES, NumericType, SimVarRegistry, VariableDef
from pysimbridge.state import StateCache

__all__ = [
    "__version__",
    "BridgeCancelledError",
    "BridgeConfig",
    "BridgeState",
    "CachedState",
    "ConnectionState",
    "DialFailedError",
    "HandshakeFailedError",
    "InsufficientBytesError",
    "MalformedHeaderError",
    "NotConnectedError",
    "NumericType",
    "POSITION_VARIABLES",
    "PayloadTooShortError",
    "Poller",
    "Position",
    "ReadFailedError",
    "SimBridge",
    "SimBridgeError",
    "SimCodecError",
    "SimConnection",
    "SimConnectionError",
    "SimVarRegistry",
    "StaleDataError",
    "StateCache",
    "UnknownVariableError",
    "UnsupportedTypeError",
    "VariableDef",
    "WriteFailedError",
]
