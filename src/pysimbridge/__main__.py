"""Command-line entry point: run the simulator bridge behind a stdio MCP server.

Run with::

    pysimbridge                    # via the console script
    python -m pysimbridge --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys

from pysimbridge.client import SimBridge
from pysimbridge.config import BridgeConfig
from pysimbridge.server import create_server

_logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pysimbridge",
        description="Expose live flight simulator position data as an MCP tool over stdio.",
    )
    parser.add_argument("--host", default=None, help="Simulator host (env: SIMCONNECT_HOST)")
    parser.add_argument("--port", type=int, default=None, help="Simulator port (env: SIMCONNECT_PORT)")
    parser.add_argument("--log-level", default=None, help="Logging level (env: SIMBRIDGE_LOG_LEVEL)")
    return parser.parse_args(argv)


async def _serve(config: BridgeConfig) -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops; KeyboardInterrupt still applies there.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)

    bridge = SimBridge(config)
    bridge.start(stop)
    server_task = asyncio.create_task(create_server(bridge).run_stdio_async(), name="pysimbridge-mcp")
    stop_task = asyncio.create_task(stop.wait(), name="pysimbridge-stop")
    try:
        done, _ = await asyncio.wait({server_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        if server_task in done:
            # stdin closed: the MCP client went away.
            server_task.result()
            _logger.info("MCP transport closed, shutting down")
    finally:
        stop.set()
        for task in (server_task, stop_task):
            if not task.done():
                task.cancel()
        await asyncio.gather(server_task, stop_task, return_exceptions=True)
        await bridge.stop()


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``pysimbridge`` command. Returns the process exit code."""
    args = _parse_args(argv)
    config = BridgeConfig.from_env(host=args.host, port=args.port, log_level=args.log_level)

    # stdout is the JSON-RPC transport; all logging goes to stderr.
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    _logger.info(
        "Bridging simulator at %s:%d (poll=%.3fs, stale=%.1fs)",
        config.host,
        config.port,
        config.poll_interval,
        config.stale_threshold,
    )

    try:
        asyncio.run(_serve(config))
    except KeyboardInterrupt:
        return 0
    except Exception:
        _logger.exception("MCP server exited")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
