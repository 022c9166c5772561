from __future__ import annotations

import logging

import pytest

from pysimbridge import __main__ as cli
from pysimbridge.config import BridgeConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("SIMCONNECT_HOST", "SIMCONNECT_PORT", "SIMBRIDGE_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


def test_main_returns_zero_on_clean_shutdown(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[BridgeConfig] = []

    async def _serve(config: BridgeConfig) -> None:
        seen.append(config)

    monkeypatch.setattr(cli, "_serve", _serve)

    assert cli.main(["--host", "10.0.0.5", "--port", "5000"]) == 0
    assert (seen[0].host, seen[0].port) == ("10.0.0.5", 5000)


def test_main_logs_failure_under_module_logger(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    async def _serve(_config: BridgeConfig) -> None:
        raise RuntimeError("transport broke")

    monkeypatch.setattr(cli, "_serve", _serve)

    with caplog.at_level(logging.ERROR):
        assert cli.main([]) == 1

    failures = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert [record.name for record in failures] == ["pysimbridge.__main__"]
    assert failures[0].exc_info is not None
