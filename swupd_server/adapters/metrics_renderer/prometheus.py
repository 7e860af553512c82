"""Prometheus implementation of the MetricsRenderer protocol.

Wraps the CollectorRegistry the download metrics were created on.  The
scraper's ``Accept`` header picks between the classic text format and
OpenMetrics, as prometheus-client's own HTTP handler does.
"""

from typing import Optional

from prometheus_client import CollectorRegistry
from prometheus_client.exposition import choose_encoder

from swupd_server.core.protocols.metrics_renderer import MetricsRenderer


class PrometheusMetricsRenderer(MetricsRenderer):
    """Render all metrics in a shared CollectorRegistry."""

    def __init__(self, registry: CollectorRegistry) -> None:
        self._registry = registry

    def render(self, accept: Optional[str] = None) -> tuple[bytes, str]:
        encoder, content_type = choose_encoder(accept or "")
        return encoder(self._registry), content_type
