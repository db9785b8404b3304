"""Command line entry point: ``nest-exporter``.

Usage
-----
::

    export NEST_TOKEN="c.xxxx"
    nest-exporter --addr :9264 --poll 2m

Flags override the matching ``NEST_*`` environment variables.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys

from prometheus_client import disable_created_metrics

from nest_exporter.client import NestClient
from nest_exporter.config import ExporterConfig
from nest_exporter.exceptions import NestConfigError
from nest_exporter.metrics import NestMetrics
from nest_exporter.poller import Poller
from nest_exporter.server import MetricsServer

_logger = logging.getLogger("nest_exporter")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nest-exporter",
        description="Export Nest thermostat state as Prometheus metrics.",
    )
    parser.add_argument("--addr", dest="bind_address", help="http listen address (default :9264)")
    parser.add_argument("--poll", dest="poll_interval", help="poll interval, e.g. 2m or 90s (default 2m)")
    parser.add_argument("--token", help="Nest API access token (default $NEST_TOKEN)")
    parser.add_argument("--timeout", dest="request_timeout", help="API request timeout (default 30s)")
    parser.add_argument(
        "--evict-stale",
        action="store_true",
        default=None,
        help="drop series of structures/thermostats missing from the latest poll",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default INFO)",
    )
    return parser


async def serve(config: ExporterConfig, stop: asyncio.Event | None = None) -> None:
    """Run the exporter until *stop* is set (or SIGINT/SIGTERM arrives)."""
    if stop is None:
        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, stop.set)

    metrics = NestMetrics()
    host, port = config.listen
    server = MetricsServer(metrics, host, port)

    async with NestClient(config) as client:
        await server.start()
        try:
            poller = Poller(
                client,
                metrics,
                interval=config.poll_interval,
                evict_stale=config.evict_stale,
            )
            await poller.run(stop)
        finally:
            await server.stop()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ExporterConfig.from_env(
            token=args.token,
            bind_address=args.bind_address,
            poll_interval=args.poll_interval,
            request_timeout=args.request_timeout,
            evict_stale=args.evict_stale,
        )
    except NestConfigError as exc:
        _logger.error("%s", exc)
        return 1

    # No *_created sample next to nest_api_errors_total.
    disable_created_metrics()
    _logger.info("Starting nest-exporter on %s", config.bind_address)
    asyncio.run(serve(config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
