"""Staleness policy for cached position data."""

from __future__ import annotations


def is_stale(age_seconds: float, threshold_seconds: float) -> bool:
    """Return ``True`` when data of *age_seconds* must no longer be served.

    A zero or negative threshold disables the check.
    """
    if threshold_seconds <= 0:
        return False
    return age_seconds > threshold_seconds
