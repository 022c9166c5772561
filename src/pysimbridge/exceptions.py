"""Custom exception hierarchy for pysimbridge."""

from __future__ import annotations


class SimBridgeError(Exception):
    """Base exception for all pysimbridge errors."""


class SimCodecError(SimBridgeError):
    """Binary encode/decode failure (local to the immediate caller)."""


class MalformedHeaderError(SimCodecError):
    """Message header is truncated or declares an impossible size."""


class PayloadTooShortError(SimCodecError):
    """Data payload is shorter than the registered definition requires."""

    def __init__(self, message: str, *, expected: int = 0, actual: int = 0) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class InsufficientBytesError(SimCodecError):
    """Not enough bytes to decode a single simulation variable value."""


class UnsupportedTypeError(SimCodecError):
    """Numeric type tag has no registered decoder."""


class UnknownVariableError(SimBridgeError):
    """Simulation variable is not in the allowlist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown simulation variable: {name!r}")


class SimConnectionError(SimBridgeError):
    """Session-level failure. Fatal to the current connection, never to the process."""

    def __init__(
        self,
        message: str,
        *,
        host: str = "",
        port: int | None = None,
    ) -> None:
        self.host = host
        self.port = port
        super().__init__(message)


class DialFailedError(SimConnectionError):
    """TCP connection to the simulator could not be established."""


class HandshakeFailedError(SimConnectionError):
    """The OPEN message could not be delivered after dialing."""


class NotConnectedError(SimConnectionError):
    """Operation attempted on a connection that is not open."""


class WriteFailedError(SimConnectionError):
    """Writing a framed message to the simulator failed."""


class ReadFailedError(SimConnectionError):
    """Reading a framed message from the simulator failed (EOF, reset, ...)."""


class StaleDataError(SimBridgeError):
    """No position has been received yet, or the last one is too old.

    "Never connected", "connected but no data yet" and "data aged out"
    are all reported through this single error.
    """


class BridgeCancelledError(SimBridgeError):
    """The shared cancellation signal fired.

    Terminates every loop without being treated as a failure.
    """
