"""Periodic position polling over a :class:`SimConnection`."""

from __future__ import annotations

import asyncio
import logging
from typing import NoReturn, Protocol

from pysimbridge._constants import (
    DEFAULT_POLL_INTERVAL,
    DEFINITION_ID_POSITION,
    OBJECT_ID_USER,
    REQUEST_ID_POSITION,
    MessageType,
)
from pysimbridge._payload import parse_position_payload
from pysimbridge.connection import SimConnection
from pysimbridge.exceptions import BridgeCancelledError, SimCodecError
from pysimbridge.models.position import Position
from pysimbridge.simvars import POSITION_VARIABLES

_logger = logging.getLogger(__name__)


class PositionUpdater(Protocol):
    """Sink for decoded positions (the state cache in production)."""

    def update(self, position: Position) -> None: ...


class Poller:
    """Registers the position definition and keeps requesting it.

    Requests are fire-and-forget: responses are matched only by the shared
    request ID, and the number of requests in flight is not bounded. A slow
    simulator simply sees requests accumulate.
    """

    def __init__(
        self,
        connection: SimConnection,
        updater: PositionUpdater,
        *,
        poll_interval: float | None = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._connection = connection
        self._updater = updater
        if not poll_interval or poll_interval <= 0:
            poll_interval = DEFAULT_POLL_INTERVAL
        self._poll_interval = poll_interval
        self.requests_sent = 0
        self.responses_received = 0

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    async def register_variable_set(self) -> None:
        """Register every position variable, in payload order, under one definition."""
        for var in POSITION_VARIABLES:
            await self._connection.register_variable(DEFINITION_ID_POSITION, var)
        _logger.debug(
            "Registered %d position variables (definition %d)",
            len(POSITION_VARIABLES),
            DEFINITION_ID_POSITION,
        )

    async def run(self, cancel_event: asyncio.Event | None = None) -> NoReturn:
        """Poll until cancelled or the connection fails.

        Never returns normally.

        The read loop is the only background task that touches the
        connection. A second, I/O-free task just waits on *cancel_event* so
        the tick wait can wake on cancellation. Both are cancelled and
        awaited before this method exits.

        Raises
        ------
        BridgeCancelledError
            *cancel_event* fired.
        SimConnectionError
            A send or receive on the connection failed.
        """
        cancel_event = cancel_event or asyncio.Event()
        read_task = asyncio.create_task(self._read_loop(), name="pysimbridge-read-loop")
        cancel_task = asyncio.create_task(cancel_event.wait(), name="pysimbridge-cancel-wait")
        try:
            while True:
                done, _ = await asyncio.wait(
                    {read_task, cancel_task},
                    timeout=self._poll_interval,
                    return_when=asyncio.FIRST_COMPLETED,
                )
                # Cancellation wins over a read failure observed in the same wake-up.
                if cancel_task in done or cancel_event.is_set():
                    raise BridgeCancelledError("poller cancelled")
                if read_task in done:
                    read_task.result()  # re-raises the connection error

                await self._connection.request_data(DEFINITION_ID_POSITION, OBJECT_ID_USER, REQUEST_ID_POSITION)
                self.requests_sent += 1
        finally:
            await _reap(read_task)
            await _reap(cancel_task)

    async def _read_loop(self) -> NoReturn:
        while True:
            header, payload = await self._connection.receive_next()
            if header.type == MessageType.SIM_OBJECT_DATA:
                if header.id != REQUEST_ID_POSITION:
                    continue
                try:
                    position = parse_position_payload(payload)
                except SimCodecError as exc:
                    _logger.warning("Dropping undecodable position payload: %s", exc)
                    continue
                self.responses_received += 1
                self._updater.update(position)
            elif header.type == MessageType.EXCEPTION:
                _logger.warning("Simulator reported an exception (id=%d, %d payload bytes)", header.id, len(payload))


async def _reap(task: asyncio.Task[object]) -> None:
    """Cancel *task* and wait for it, consuming any stored exception."""
    if not task.done():
        task.cancel()
    await asyncio.gather(task, return_exceptions=True)
