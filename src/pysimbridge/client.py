"""High-level bridge: keeps a simulator session alive and feeds the state cache."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import datetime
from enum import StrEnum
from typing import Any

from pysimbridge._constants import BACKOFF_INITIAL, BACKOFF_MAX
from pysimbridge.config import BridgeConfig
from pysimbridge.connection import ConnectionState, SimConnection
from pysimbridge.exceptions import BridgeCancelledError, SimBridgeError
from pysimbridge.models.position import Position
from pysimbridge.poller import Poller
from pysimbridge.state.store import StateCache

_logger = logging.getLogger(__name__)


class BridgeState(StrEnum):
    IDLE = "idle"
    CONNECTING = "connecting"
    RUNNING = "running"
    BACKOFF_WAIT = "backoff_wait"
    STOPPED = "stopped"


def next_backoff(current: float, *, maximum: float = BACKOFF_MAX) -> float:
    """Double *current*, capped at *maximum*."""
    return min(current * 2, maximum)


def _default_connection_factory(config: BridgeConfig) -> SimConnection:
    return SimConnection(
        config.host,
        config.port,
        timeout=config.timeout,
        app_name=config.app_name,
    )


class SimBridge:
    """Owns the reconnect loop and the position cache.

    Each cycle connects, registers the position definition and polls until
    the session fails. Failures other than cancellation lead to a backoff
    wait (1 s doubling to 30 s) and a fresh connection. The backoff is not
    reset after a successful session.

    Usage::

        async with SimBridge(BridgeConfig.from_env()) as bridge:
            position = bridge.get_position()
    """

    def __init__(
        self,
        config: BridgeConfig,
        *,
        cache: StateCache | None = None,
        connection_factory: Callable[[BridgeConfig], SimConnection] | None = None,
        backoff_initial: float = BACKOFF_INITIAL,
        backoff_max: float = BACKOFF_MAX,
    ) -> None:
        self._config = config
        self._cache = cache if cache is not None else StateCache(config.stale_threshold)
        self._connection_factory = connection_factory or _default_connection_factory
        self._backoff_initial = backoff_initial
        self._backoff_max = backoff_max
        self._state = BridgeState.IDLE
        self._connection: SimConnection | None = None
        self._cancel_event: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None
        self.attempts = 0

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SimBridge:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    def start(self, cancel_event: asyncio.Event | None = None) -> asyncio.Task[None]:
        """Spawn the reconnect loop as a background task."""
        if self._task is not None and not self._task.done():
            return self._task
        self._cancel_event = cancel_event or asyncio.Event()
        self._task = asyncio.create_task(self.run(self._cancel_event), name="pysimbridge-bridge")
        return self._task

    async def stop(self) -> None:
        """Signal cancellation and wait for the loop to wind down."""
        if self._cancel_event is not None:
            self._cancel_event.set()
        task = self._task
        self._task = None
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    # ------------------------------------------------------------------
    # Accessors used by the tool layer
    # ------------------------------------------------------------------

    @property
    def config(self) -> BridgeConfig:
        return self._config

    @property
    def cache(self) -> StateCache:
        return self._cache

    @property
    def state(self) -> BridgeState:
        return self._state

    @property
    def connection_state(self) -> ConnectionState:
        connection = self._connection
        if connection is None:
            if self._state is BridgeState.BACKOFF_WAIT:
                return ConnectionState.RECONNECTING
            return ConnectionState.DISCONNECTED
        return connection.state

    def get_position(self) -> Position:
        """Return the cached position or raise :class:`StaleDataError`."""
        return self._cache.get_position()

    def last_updated(self) -> datetime | None:
        return self._cache.last_updated()

    # ------------------------------------------------------------------
    # Reconnect loop
    # ------------------------------------------------------------------

    async def run(self, cancel_event: asyncio.Event) -> None:
        """Run connect/register/poll cycles until *cancel_event* is set."""
        backoff = self._backoff_initial
        try:
            while not cancel_event.is_set():
                self._state = BridgeState.CONNECTING
                self.attempts += 1
                try:
                    await self._run_session(cancel_event)
                except BridgeCancelledError:
                    return
                except SimBridgeError as exc:
                    if cancel_event.is_set():
                        return
                    _logger.warning("simconnect: disconnected: %s (retrying in %.0fs)", exc, backoff)
                except Exception:
                    if cancel_event.is_set():
                        return
                    _logger.error("Unexpected session failure (retrying in %.0fs)", backoff, exc_info=True)

                self._state = BridgeState.BACKOFF_WAIT
                if await _wait_event(cancel_event, backoff):
                    return
                backoff = next_backoff(backoff, maximum=self._backoff_max)
        finally:
            self._state = BridgeState.STOPPED
            _logger.debug("Bridge loop stopped after %d attempt(s)", self.attempts)

    async def _run_session(self, cancel_event: asyncio.Event) -> None:
        connection = self._connection_factory(self._config)
        await connection.connect(cancel_event)
        self._connection = connection
        try:
            poller = Poller(connection, self._cache, poll_interval=self._config.poll_interval)
            await poller.register_variable_set()
            self._state = BridgeState.RUNNING
            await poller.run(cancel_event)
        finally:
            self._connection = None
            await connection.close()


async def _wait_event(event: asyncio.Event, timeout: float) -> bool:
    """Wait up to *timeout* seconds for *event*; return whether it fired."""
    try:
        await asyncio.wait_for(event.wait(), timeout=timeout)
    except TimeoutError:
        return False
    return True
