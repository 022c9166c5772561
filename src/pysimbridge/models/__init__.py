"""Data models for pysimbridge."""

from pysimbridge.models.position import CachedState, Position

__all__ = [
    "CachedState",
    "Position",
]
