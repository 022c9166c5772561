from __future__ import annotations

import pytest

from pysimbridge.config import BridgeConfig, parse_duration

_ENV_KEYS = (
    "SIMCONNECT_HOST",
    "SIMCONNECT_PORT",
    "SIMCONNECT_TIMEOUT",
    "SIMCONNECT_APP_NAME",
    "POLL_INTERVAL",
    "STALE_THRESHOLD",
    "SIMBRIDGE_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_from_env_defaults() -> None:
    config = BridgeConfig.from_env()

    assert config.host == "192.168.10.100"
    assert config.port == 4500
    assert config.timeout == 10.0
    assert config.app_name == "flightsim-mcp"
    assert config.poll_interval == 0.5
    assert config.stale_threshold == 5.0
    assert config.log_level == "INFO"


@pytest.mark.parametrize(
    ("key", "value", "field", "expected"),
    [
        ("SIMCONNECT_HOST", "10.0.0.5", "host", "10.0.0.5"),
        ("SIMCONNECT_PORT", "9999", "port", 9999),
        ("SIMCONNECT_PORT", "notanumber", "port", 4500),
        ("SIMCONNECT_TIMEOUT", "30s", "timeout", 30.0),
        ("SIMCONNECT_TIMEOUT", "bad", "timeout", 10.0),
        ("SIMCONNECT_APP_NAME", "my-app", "app_name", "my-app"),
        ("POLL_INTERVAL", "250ms", "poll_interval", 0.25),
        ("POLL_INTERVAL", "", "poll_interval", 0.5),
        ("STALE_THRESHOLD", "0", "stale_threshold", 0.0),
        ("STALE_THRESHOLD", "1m30s", "stale_threshold", 90.0),
        ("SIMBRIDGE_LOG_LEVEL", "debug", "log_level", "DEBUG"),
    ],
)
def test_from_env_reads_variables(
    monkeypatch: pytest.MonkeyPatch,
    key: str,
    value: str,
    field: str,
    expected: object,
) -> None:
    monkeypatch.setenv(key, value)

    assert getattr(BridgeConfig.from_env(), field) == expected


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIMCONNECT_HOST", "10.0.0.5")

    config = BridgeConfig.from_env(host="127.0.0.1", port=None)

    assert config.host == "127.0.0.1"
    assert config.port == 4500


@pytest.mark.parametrize(
    ("text", "seconds"),
    [("500ms", 0.5), ("5s", 5.0), ("1m", 60.0), ("1h", 3600.0), ("1m30s", 90.0), ("2.5", 2.5), ("1.5s", 1.5)],
)
def test_parse_duration(text: str, seconds: float) -> None:
    assert parse_duration(text) == pytest.approx(seconds)


@pytest.mark.parametrize("text", ["", "abc", "5 s", "-5s", "5x", "nan", "inf", "-inf", "-5"])
def test_parse_duration_rejects_garbage(text: str) -> None:
    with pytest.raises(ValueError):
        parse_duration(text)


def test_non_finite_poll_interval_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POLL_INTERVAL", "nan")
    monkeypatch.setenv("STALE_THRESHOLD", "inf")

    config = BridgeConfig.from_env()

    assert config.poll_interval == 0.5
    assert config.stale_threshold == 5.0
