"""Metrics renderer adapters."""

from swupd_server.adapters.metrics_renderer.fake import FakeMetricsRenderer
from swupd_server.adapters.metrics_renderer.prometheus import PrometheusMetricsRenderer

__all__ = ["PrometheusMetricsRenderer", "FakeMetricsRenderer"]
