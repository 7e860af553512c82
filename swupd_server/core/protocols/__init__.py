"""Core protocols for dependency injection."""

from swupd_server.core.protocols.download_metrics import DownloadMetrics
from swupd_server.core.protocols.metrics_renderer import MetricsRenderer

__all__ = [
    "DownloadMetrics",
    "MetricsRenderer",
]
