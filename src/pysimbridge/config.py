"""Bridge configuration for pysimbridge."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from typing import Any

from pysimbridge._constants import DEFAULT_DIAL_TIMEOUT, DEFAULT_POLL_INTERVAL, DEFAULT_STALE_THRESHOLD

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(h|ms|m|s)")
_DURATION_UNITS: dict[str, float] = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def parse_duration(value: str) -> float:
    """Parse ``"500ms"``, ``"5s"``, ``"1m30s"`` or bare seconds (``"2.5"``) into seconds.

    Raises :class:`ValueError` for anything else.
    """
    text = value.strip()
    if not text:
        raise ValueError("empty duration")
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds) or seconds < 0:
            raise ValueError(f"invalid duration: {value!r}")
        return seconds

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        raise ValueError(f"invalid duration: {value!r}")
    return total


def _env_str(value: str | None, default: str) -> str:
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_duration(value: str | None, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        return parse_duration(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class BridgeConfig:
    """Bridge configuration.

    Parameters
    ----------
    host : str
        Simulator host running the SimConnect TCP endpoint.
    port : int
        Simulator TCP port.
    timeout : float
        Dial timeout in seconds.
    app_name : str
        Client identifier sent in the OPEN handshake.
    poll_interval : float
        Seconds between position requests. ``0`` means the default (0.5 s).
    stale_threshold : float
        Maximum age in seconds of position data served to callers.
        ``0`` disables staleness checking.
    log_level : str
        Logging level name used by the command-line entry point.
    """

    host: str = "192.168.10.100"
    port: int = 4500
    timeout: float = DEFAULT_DIAL_TIMEOUT
    app_name: str = "flightsim-mcp"
    poll_interval: float = DEFAULT_POLL_INTERVAL
    stale_threshold: float = DEFAULT_STALE_THRESHOLD
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, **overrides: Any) -> BridgeConfig:
        """Create configuration from environment variables.

        Reads ``SIMCONNECT_HOST``, ``SIMCONNECT_PORT``, ``SIMCONNECT_TIMEOUT``,
        ``SIMCONNECT_APP_NAME``, ``POLL_INTERVAL``, ``STALE_THRESHOLD`` and
        ``SIMBRIDGE_LOG_LEVEL``. Unset, empty or unparseable values fall back
        to the defaults. Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        BridgeConfig
            Populated configuration.
        """
        env = os.environ
        defaults = cls()

        config_kwargs: dict[str, Any] = {
            "host": _env_str(env.get("SIMCONNECT_HOST"), defaults.host),
            "port": _env_int(env.get("SIMCONNECT_PORT"), defaults.port),
            "timeout": _env_duration(env.get("SIMCONNECT_TIMEOUT"), defaults.timeout),
            "app_name": _env_str(env.get("SIMCONNECT_APP_NAME"), defaults.app_name),
            "poll_interval": _env_duration(env.get("POLL_INTERVAL"), defaults.poll_interval),
            "stale_threshold": _env_duration(env.get("STALE_THRESHOLD"), defaults.stale_threshold),
            "log_level": _env_str(env.get("SIMBRIDGE_LOG_LEVEL"), defaults.log_level).upper(),
        }
        config_kwargs.update({key: value for key, value in overrides.items() if value is not None})

        return cls(**config_kwargs)
