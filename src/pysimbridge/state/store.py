"""Concurrency-safe cache of the last known aircraft position.

One writer (the poller) and many readers (tool calls). Each update swaps in
a new immutable :class:`CachedState`; readers grab the current reference
and therefore always see a whole snapshot, never a half-written one.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime

from pysimbridge.exceptions import StaleDataError
from pysimbridge.models.position import CachedState, Position
from pysimbridge.state.policy import is_stale


def _utcnow() -> datetime:
    return datetime.now(UTC)


class StateCache:
    """Last-write-wins store for the user aircraft position.

    Parameters
    ----------
    stale_threshold : float
        Maximum age in seconds of data still served by :meth:`get_position`.
        ``0`` disables staleness checking.
    clock : callable
        Monotonic clock used for age computation (injectable for tests).
    wall_clock : callable
        Source of the ``received_at`` timestamp.
    """

    def __init__(
        self,
        stale_threshold: float = 0.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._stale_threshold = stale_threshold
        self._clock = clock
        self._wall_clock = wall_clock
        self._write_lock = threading.Lock()
        self._snapshot: CachedState | None = None

    @property
    def stale_threshold(self) -> float:
        return self._stale_threshold

    def update(self, position: Position) -> None:
        """Replace the cached position and stamp the receipt time."""
        with self._write_lock:
            self._snapshot = CachedState(
                position=position,
                received_at=self._wall_clock(),
                received_monotonic=self._clock(),
            )

    def get_position(self) -> Position:
        """Return the cached position.

        Raises :class:`StaleDataError` when nothing has been received yet or
        the last update is older than the staleness threshold.
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise StaleDataError("state: no position data received yet")
        age = self._clock() - snapshot.received_monotonic
        if is_stale(age, self._stale_threshold):
            raise StaleDataError(f"state: position data is stale ({age:.1f}s old)")
        return snapshot.position

    def last_updated(self) -> datetime | None:
        """Wall-clock time of the most recent update, ``None`` before the first."""
        snapshot = self._snapshot
        return snapshot.received_at if snapshot is not None else None

    def snapshot(self) -> CachedState | None:
        """Current cached state without any staleness check."""
        return self._snapshot
