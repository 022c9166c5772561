#!/usr/bin/env python3
"""Position probe for a live simulator.

Connects with the regular bridge configuration (``SIMCONNECT_*`` env vars),
registers the position definition and prints every decoded position update.

Use this to check connectivity and response cadence without an MCP client.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
import time
from dataclasses import dataclass
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pysimbridge import BridgeConfig, Poller, Position, SimConnection, SimConnectionError  # noqa: E402
from pysimbridge.exceptions import BridgeCancelledError  # noqa: E402


@dataclass
class ProbeStats:
    started_at: float
    total_updates: int = 0
    last_update_at: float | None = None

    def on_update(self, now: float) -> float | None:
        previous = self.last_update_at
        self.total_updates += 1
        self.last_update_at = now
        return None if previous is None else now - previous


class _PrintingUpdater:
    def __init__(self, stats: ProbeStats, as_json: bool) -> None:
        self._stats = stats
        self._as_json = as_json

    def update(self, position: Position) -> None:
        delta = self._stats.on_update(time.time())
        gap_text = "first" if delta is None else f"{delta * 1000:.0f}ms"
        if self._as_json:
            print(position.model_dump_json())
            return
        print(
            f"[probe] #{self._stats.total_updates} gap={gap_text} "
            f"lat={position.latitude:.5f} lon={position.longitude:.5f} "
            f"alt={position.altitude_msl:.0f}ft hdg={position.heading_true:.1f} "
            f"ias={position.indicated_airspeed:.0f}kts vs={position.vertical_speed:.0f}fpm"
        )


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print live position updates from the simulator.")
    parser.add_argument("--host", default=None, help="Simulator host (default: SIMCONNECT_HOST).")
    parser.add_argument("--port", type=int, default=None, help="Simulator port (default: SIMCONNECT_PORT).")
    parser.add_argument(
        "--duration",
        type=float,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument("--json", action="store_true", help="Print each position as JSON.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logs (wire trace).")
    return parser.parse_args()


async def _probe(config: BridgeConfig, args: argparse.Namespace, stats: ProbeStats) -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)
    if args.duration > 0:
        loop.call_later(args.duration, stop.set)

    conn = SimConnection(config.host, config.port, timeout=config.timeout, app_name=config.app_name)
    await conn.connect(stop)
    print(f"[probe] Connected to {conn.address}")
    poller = Poller(conn, _PrintingUpdater(stats, args.json), poll_interval=config.poll_interval)
    try:
        await poller.register_variable_set()
        await poller.run(stop)
    except BridgeCancelledError:
        pass
    finally:
        await conn.close()
        print(f"[probe] requests_sent={poller.requests_sent} responses={poller.responses_received}")


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = BridgeConfig.from_env(host=args.host, port=args.port)
    stats = ProbeStats(started_at=time.time())
    try:
        asyncio.run(_probe(config, args, stats))
    except SimConnectionError as exc:
        print(f"[probe] Connection failed: {exc}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        pass

    runtime = time.time() - stats.started_at
    rate = stats.total_updates / runtime if runtime > 0 else 0.0
    print(f"[probe] runtime_s={runtime:.1f} updates={stats.total_updates} rate={rate:.2f}/s")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
