"""Metrics exposition endpoint."""

from __future__ import annotations

import logging

from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST

from nest_exporter._constants import METRICS_PATH
from nest_exporter.metrics import NestMetrics

_logger = logging.getLogger(__name__)

METRICS_KEY: web.AppKey[NestMetrics] = web.AppKey("metrics", NestMetrics)


async def _handle_metrics(request: web.Request) -> web.Response:
    metrics = request.app[METRICS_KEY]
    body = metrics.render()
    return web.Response(body=body, headers={"Content-Type": CONTENT_TYPE_LATEST})


def create_app(metrics: NestMetrics) -> web.Application:
    """Build the web application serving ``GET /metrics``."""
    app = web.Application()
    app[METRICS_KEY] = metrics
    app.router.add_get(METRICS_PATH, _handle_metrics)
    return app


class MetricsServer:
    """Runs :func:`create_app` on a TCP listen address."""

    def __init__(self, metrics: NestMetrics, host: str, port: int) -> None:
        self._app = create_app(metrics)
        self._host = host
        self._port = port
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        if self._runner is not None:
            return
        runner = web.AppRunner(self._app, access_log=None)
        await runner.setup()
        site = web.TCPSite(runner, self._host, self._port)
        await site.start()
        self._runner = runner
        _logger.info("Serving metrics on http://%s:%d%s", self._host, self._port, METRICS_PATH)

    async def stop(self) -> None:
        if self._runner is None:
            return
        await self._runner.cleanup()
        self._runner = None
        _logger.info("Metrics server stopped")
