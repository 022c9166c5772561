from __future__ import annotations

import asyncio
import struct
from collections.abc import AsyncIterator, Iterable

import pytest_asyncio

from pysimbridge._protocol import Header, decode_header, encode_message

HEADER_SIZE = 16

SAMPLE_VALUES: tuple[float, ...] = (
    47.6062,
    -122.3321,
    35000.0,
    34950.0,
    270.0,
    268.5,
    450.0,
    455.0,
    448.0,
    500.0,
    2.5,
    -1.0,
)


def pack_position(values: Iterable[float] = SAMPLE_VALUES) -> bytes:
    values = tuple(values)
    return struct.pack(f"<{len(values)}d", *values)


class FakeSimulator:
    """Minimal in-process simulator endpoint speaking the framed protocol."""

    def __init__(self) -> None:
        self.received: asyncio.Queue[tuple[Header, bytes]] = asyncio.Queue()
        self.client_connected = asyncio.Event()
        self.port = 0
        self._server: asyncio.Server | None = None
        self._writer: asyncio.StreamWriter | None = None

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        self.port = self._server.sockets[0].getsockname()[1]

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._writer = writer
        self.client_connected.set()
        try:
            while True:
                header = decode_header(await reader.readexactly(HEADER_SIZE))
                payload = await reader.readexactly(header.size - HEADER_SIZE)
                await self.received.put((header, payload))
        except (asyncio.IncompleteReadError, OSError):
            pass

    async def next_message(self, timeout: float = 2.0) -> tuple[Header, bytes]:
        return await asyncio.wait_for(self.received.get(), timeout=timeout)

    async def next_of_type(self, message_type: int, timeout: float = 2.0) -> tuple[Header, bytes]:
        while True:
            header, payload = await self.next_message(timeout)
            if header.type == message_type:
                return header, payload

    async def send(self, message_type: int, message_id: int, payload: bytes = b"") -> None:
        await self.send_raw(encode_message(message_type, message_id, payload))

    async def send_raw(self, data: bytes) -> None:
        await asyncio.wait_for(self.client_connected.wait(), timeout=2.0)
        assert self._writer is not None
        self._writer.write(data)
        await self._writer.drain()

    async def drop_client(self) -> None:
        if self._writer is not None:
            self._writer.close()

    async def stop(self) -> None:
        await self.drop_client()
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()


@pytest_asyncio.fixture
async def fake_sim() -> AsyncIterator[FakeSimulator]:
    sim = FakeSimulator()
    await sim.start()
    try:
        yield sim
    finally:
        await sim.stop()
