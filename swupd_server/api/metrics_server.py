"""Sidecar HTTP server exposing metrics for Prometheus scraping.

Runs on its own port next to the artifact server so scrapes never compete
with downloads and never show up in the download metrics themselves.
"""

from typing import Optional

from aiohttp import web

from swupd_server.core.logging import logger
from swupd_server.core.protocols.metrics_renderer import MetricsRenderer


class MetricsServer:
    """aiohttp server serving ``/metrics`` and ``/health``."""

    def __init__(self, renderer: MetricsRenderer, port: int, host: str = "0.0.0.0") -> None:
        """Initialize the metrics server.

        Args:
            renderer: Serializes the collected metrics.
            port: The port to listen on; ``0`` lets the OS pick one.
            host: The host to listen on.
        """
        self._renderer = renderer
        self._port = port
        self._host = host
        self._app = web.Application()
        self._app.add_routes(
            [
                web.get("/metrics", self._handle_metrics),
                web.get("/health", self._handle_health),
            ]
        )
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None
        self.logger = logger.with_context(context_base="metrics_server", port=port)

    async def _handle_metrics(self, request: web.Request) -> web.Response:
        body, content_type = self._renderer.render(request.headers.get("Accept"))
        return web.Response(body=body, headers={"Content-Type": content_type})

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.Response(text="OK\n", status=200)

    async def start(self) -> None:
        """Bind and start serving."""
        self._runner = web.AppRunner(self._app, access_log=None)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, host=self._host, port=self._port)
        await self._site.start()
        self.logger.info(f"Serving metrics on http://{self._host}:{self._port}/metrics")

    async def stop(self) -> None:
        """Stops the server gracefully."""
        if self._site:
            await self._site.stop()
            self._site = None
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self.logger.info("Metrics server stopped")
