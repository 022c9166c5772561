"""State layer.

Holds the single most recent aircraft position and decides whether it is
still fresh enough to hand to callers.
"""

from pysimbridge.state.store import StateCache

__all__ = ["StateCache"]
