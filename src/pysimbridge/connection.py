"""TCP session to the simulator: handshake, framed send/receive, close."""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
from enum import StrEnum

from pysimbridge._constants import DEFAULT_DIAL_TIMEOUT, HEADER_SIZE, MessageType
from pysimbridge._protocol import (
    Header,
    decode_header,
    encode_cstring,
    encode_message,
    encode_u32,
)
from pysimbridge.exceptions import (
    BridgeCancelledError,
    DialFailedError,
    HandshakeFailedError,
    MalformedHeaderError,
    NotConnectedError,
    ReadFailedError,
    WriteFailedError,
)
from pysimbridge.simvars import DEFAULT_REGISTRY, SimVarRegistry, VariableDef

_logger = logging.getLogger(__name__)


class ConnectionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"


class SimConnection:
    """One TCP session to the simulator.

    The connection never reconnects on its own. After a failure the caller
    discards it and builds a new one.

    Usage::

        conn = SimConnection("127.0.0.1", 4500, app_name="my-client")
        await conn.connect()
        try:
            header, payload = await conn.receive_next()
        finally:
            await conn.close()
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        timeout: float = DEFAULT_DIAL_TIMEOUT,
        app_name: str = "pysimbridge",
        registry: SimVarRegistry = DEFAULT_REGISTRY,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout
        self._app_name = app_name
        self._registry = registry
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._state = ConnectionState.DISCONNECTED
        self._write_lock = asyncio.Lock()
        self._ids = itertools.count(1)

    @property
    def state(self) -> ConnectionState:
        """Current lifecycle state (read-only)."""
        return self._state

    @property
    def address(self) -> str:
        return f"{self._host}:{self._port}"

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    def _transition(self, new_state: ConnectionState) -> None:
        if new_state is not self._state:
            _logger.debug("Connection %s: %s -> %s", self.address, self._state, new_state)
        self._state = new_state

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self, cancel_event: asyncio.Event | None = None) -> None:
        """Dial the simulator and perform the OPEN handshake.

        Raises
        ------
        BridgeCancelledError
            *cancel_event* was already set; no network call is made.
        DialFailedError
            The TCP connection could not be established within ``timeout``.
        HandshakeFailedError
            The OPEN message could not be written.
        """
        if cancel_event is not None and cancel_event.is_set():
            raise BridgeCancelledError("connect cancelled before dialing")

        _logger.debug("Dialing simulator at %s (timeout=%.1fs)", self.address, self._timeout)
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(self._host, self._port),
                timeout=self._timeout,
            )
        except (OSError, TimeoutError, OverflowError, UnicodeError) as exc:
            # OverflowError: port out of range; UnicodeError: host fails IDNA encoding.
            raise DialFailedError(
                f"Dial {self.address} failed: {exc or type(exc).__name__}",
                host=self._host,
                port=self._port,
            ) from exc

        await self.attach(reader, writer, cancel_event)

    async def attach(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        """Perform the OPEN handshake over already-open streams."""
        if cancel_event is not None and cancel_event.is_set():
            writer.close()
            raise BridgeCancelledError("connect cancelled before handshake")

        async with self._write_lock:
            self._transition(ConnectionState.CONNECTING)
            self._reader = reader
            self._writer = writer
            try:
                await self._send_locked(MessageType.OPEN, encode_cstring(self._app_name))
            except WriteFailedError as exc:
                self._release_locked()
                raise HandshakeFailedError(
                    f"OPEN handshake with {self.address} failed: {exc}",
                    host=self._host,
                    port=self._port,
                ) from exc
            self._transition(ConnectionState.CONNECTED)
        _logger.info("Connected to simulator at %s as %r", self.address, self._app_name)

    async def close(self) -> None:
        """Send a best-effort CLOSE and release the transport.

        Idempotent: closing an already-closed connection is a no-op.
        """
        async with self._write_lock:
            writer = self._writer
            if writer is None:
                return
            try:
                await self._send_locked(MessageType.CLOSE, b"")
            except WriteFailedError:
                _logger.debug("CLOSE not delivered to %s", self.address, exc_info=True)
            self._release_locked()
            with contextlib.suppress(OSError):
                await writer.wait_closed()
        _logger.info("Disconnected from simulator at %s", self.address)

    def _release_locked(self) -> None:
        writer = self._writer
        self._writer = None
        self._reader = None
        if writer is not None:
            writer.close()
        self._transition(ConnectionState.DISCONNECTED)

    # ------------------------------------------------------------------
    # Framed I/O
    # ------------------------------------------------------------------

    async def send(self, message_type: int, payload: bytes = b"") -> int:
        """Frame and write one message; returns the assigned message ID.

        Concurrent sends never interleave their bytes.
        """
        async with self._write_lock:
            return await self._send_locked(message_type, payload)

    async def _send_locked(self, message_type: int, payload: bytes) -> int:
        writer = self._writer
        if writer is None:
            raise NotConnectedError("simconnect: not connected", host=self._host, port=self._port)

        message_id = next(self._ids)
        frame = encode_message(message_type, message_id, payload)
        try:
            writer.write(frame)
            await writer.drain()
        except (OSError, RuntimeError) as exc:
            raise WriteFailedError(
                f"write message type=0x{message_type:04x} id={message_id}: {exc}",
                host=self._host,
                port=self._port,
            ) from exc
        _logger.debug("-> type=0x%04x id=%d len=%d", message_type, message_id, len(frame))
        return message_id

    async def receive_next(self) -> tuple[Header, bytes]:
        """Block until exactly one framed message has been read.

        A zero-length payload yields ``b""``.
        """
        reader = self._reader
        if reader is None:
            raise NotConnectedError("simconnect: not connected", host=self._host, port=self._port)

        try:
            raw_header = await reader.readexactly(HEADER_SIZE)
        except (asyncio.IncompleteReadError, OSError) as exc:
            raise ReadFailedError(f"read header: {exc}", host=self._host, port=self._port) from exc

        header = decode_header(raw_header)
        if header.size < HEADER_SIZE:
            raise MalformedHeaderError(f"header declares size {header.size}, smaller than the header itself")

        try:
            payload = await reader.readexactly(header.payload_size)
        except (asyncio.IncompleteReadError, OSError) as exc:
            raise ReadFailedError(f"read payload: {exc}", host=self._host, port=self._port) from exc

        _logger.debug("<- type=0x%04x id=%d len=%d", header.type, header.id, header.size)
        return header, payload

    # ------------------------------------------------------------------
    # Protocol messages
    # ------------------------------------------------------------------

    async def register_variable(self, definition_id: int, var: VariableDef) -> None:
        """Add *var* to the simulator-side data definition *definition_id*.

        Payload: ``definition_id:u32 | name\\0 | unit\\0 | numeric_type:u32``.

        Raises :class:`UnknownVariableError` without sending anything when
        *var* is not in the connection's registry.
        """
        self._registry.validate(var.name)
        payload = b"".join(
            (
                encode_u32(definition_id),
                encode_cstring(var.name),
                encode_cstring(var.unit),
                encode_u32(int(var.numeric_type)),
            )
        )
        await self.send(MessageType.ADD_TO_DATA_DEFINITION, payload)

    async def request_data(self, definition_id: int, object_id: int, request_id: int) -> None:
        """Ask for one data response.

        Payload: ``request_id:u32 | definition_id:u32 | object_id:u32``
        (request ID first).
        """
        payload = encode_u32(request_id) + encode_u32(definition_id) + encode_u32(object_id)
        await self.send(MessageType.REQUEST_DATA, payload)
