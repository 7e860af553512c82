"""Download metrics adapters."""

from swupd_server.adapters.download_metrics.fake import FakeDownloadMetrics
from swupd_server.adapters.download_metrics.prometheus import (
    HistogramBuckets,
    PrometheusDownloadMetrics,
)

__all__ = ["PrometheusDownloadMetrics", "FakeDownloadMetrics", "HistogramBuckets"]
