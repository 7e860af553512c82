"""Prometheus-backed metrics facade.

Composes the download metrics adapter, the renderer and the sidecar HTTP
server behind a single lifecycle API so callers (main.py, tests) deal with
one object instead of three.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry

from swupd_server.adapters.download_metrics import HistogramBuckets, PrometheusDownloadMetrics
from swupd_server.adapters.metrics_renderer import PrometheusMetricsRenderer
from swupd_server.core.protocols.download_metrics import DownloadMetrics
from swupd_server.core.protocols.metrics_renderer import MetricsRenderer

if TYPE_CHECKING:
    from swupd_server.api.metrics_server import MetricsServer
    from swupd_server.core.config import Settings


class PrometheusMetricsService:
    """Facade that owns the download metrics and the sidecar server.

    ``downloads`` is typed with its protocol so the middleware can be built
    from it directly.  ``_renderer`` stays private; it is an implementation
    detail of the sidecar server.
    """

    downloads: DownloadMetrics

    def __init__(self, downloads: DownloadMetrics, renderer: MetricsRenderer) -> None:
        self.downloads = downloads
        self._renderer = renderer
        self._server: MetricsServer | None = None

    async def start(self, *, host: str, port: int) -> None:
        """Start the sidecar metrics server."""
        from swupd_server.api.metrics_server import MetricsServer

        self._server = MetricsServer(self._renderer, port, host)
        await self._server.start()

    async def stop(self) -> None:
        if self._server:
            await self._server.stop()
            self._server = None


def build_metrics_service(settings: Settings) -> PrometheusMetricsService:
    """Create one registry and wire the adapters onto it."""
    registry = CollectorRegistry()
    downloads = PrometheusDownloadMetrics(
        registry=registry,
        buckets=HistogramBuckets(
            duration=settings.DURATION_BUCKETS,
            size=settings.SIZE_BUCKETS,
            throughput=settings.THROUGHPUT_BUCKETS,
        ),
    )
    return PrometheusMetricsService(downloads, PrometheusMetricsRenderer(registry))
