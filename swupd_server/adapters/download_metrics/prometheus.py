"""Prometheus implementation of the DownloadMetrics protocol.

Uses a caller-supplied CollectorRegistry so the artifact metrics are
isolated from the default global registry and can be rendered by the
sidecar server.  Bucket boundaries express expected artifact sizes
(kilobytes to gigabytes) and transfer times (sub-second to ten minutes).
"""

from collections.abc import Sequence
from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

from swupd_server.core.protocols.download_metrics import DownloadMetrics

_KIB = 1024
_MIB = 1024 * _KIB
_GIB = 1024 * _MIB

_DURATION_BUCKETS = (0.1, 1, 10, 60, 600)
_SIZE_BUCKETS = (100 * _KIB, _MIB, 10 * _MIB, 100 * _MIB, _GIB)
_THROUGHPUT_BUCKETS = (_KIB, 100 * _KIB, _MIB, 10 * _MIB, 100 * _MIB)

_LABELS = ["code", "method"]


def _check_increasing(name: str, buckets: Sequence[float]) -> tuple[float, ...]:
    if not buckets:
        raise ValueError(f"{name} buckets must not be empty")
    if any(upper <= lower for lower, upper in zip(buckets, buckets[1:])):
        raise ValueError(f"{name} buckets must be strictly increasing, got {tuple(buckets)}")
    return tuple(buckets)


@dataclass(frozen=True)
class HistogramBuckets:
    """Bucket boundaries for the three response histograms."""

    duration: Sequence[float] = _DURATION_BUCKETS
    size: Sequence[float] = _SIZE_BUCKETS
    throughput: Sequence[float] = _THROUGHPUT_BUCKETS

    def __post_init__(self) -> None:
        object.__setattr__(self, "duration", _check_increasing("duration", self.duration))
        object.__setattr__(self, "size", _check_increasing("size", self.size))
        object.__setattr__(self, "throughput", _check_increasing("throughput", self.throughput))


class PrometheusDownloadMetrics(DownloadMetrics):
    """Prometheus-backed artifact download metrics."""

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        buckets: HistogramBuckets | None = None,
    ) -> None:
        self._registry = registry or CollectorRegistry()
        buckets = buckets or HistogramBuckets()

        self._in_flight = Gauge(
            "swupd_http_requests_inflight",
            "Current number of HTTP requests in flight for the SWUPD server",
            registry=self._registry,
        )

        self._requests_total = Counter(
            "swupd_http_requests_total",
            "Total number of HTTP requests to the SWUPD server",
            _LABELS,
            registry=self._registry,
        )

        self._response_bytes = Counter(
            "swupd_http_response_bytes_total",
            "Total number of HTTP response bytes from the SWUPD server",
            _LABELS,
            registry=self._registry,
        )

        self._duration = Histogram(
            "swupd_http_request_duration_seconds",
            "Duration of HTTP requests to the SWUPD server",
            _LABELS,
            buckets=buckets.duration,
            registry=self._registry,
        )

        self._sizes = Histogram(
            "swupd_http_response_size_bytes",
            "Size of HTTP responses from the SWUPD server",
            _LABELS,
            buckets=buckets.size,
            registry=self._registry,
        )

        self._throughput = Histogram(
            "swupd_http_response_throughput",
            "Throughput of HTTP responses from the SWUPD server",
            _LABELS,
            buckets=buckets.throughput,
            registry=self._registry,
        )

        self._images = Counter(
            "swupd_image_downloads_total",
            "Total number of image downloads from the SWUPD server",
            ["code", "release", "image"],
            registry=self._registry,
        )

        self._updates = Counter(
            "swupd_update_downloads_total",
            "Total update files downloaded from the SWUPD server",
            ["code", "release", "version"],
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    # -- DownloadMetrics protocol methods --

    def inc_in_flight(self) -> None:
        self._in_flight.inc()

    def dec_in_flight(self) -> None:
        self._in_flight.dec()

    def observe_response(
        self,
        code: str,
        method: str,
        duration: float,
        size: int,
        throughput: float,
    ) -> None:
        self._requests_total.labels(code=code, method=method).inc()
        self._response_bytes.labels(code=code, method=method).inc(size)
        self._duration.labels(code=code, method=method).observe(duration)
        self._sizes.labels(code=code, method=method).observe(size)
        self._throughput.labels(code=code, method=method).observe(throughput)

    def observe_image_download(self, code: str, release: str, image: str) -> None:
        self._images.labels(code=code, release=release, image=image).inc()

    def observe_update_download(self, code: str, release: str, version: str) -> None:
        self._updates.labels(code=code, release=release, version=version).inc()
