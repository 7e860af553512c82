"""ASGI middleware recording download metrics for every HTTP request.

The middleware never looks at response bodies.  It wraps ``send`` in a
``ResponseCapturer`` to learn the status and byte count, times the inner
app, and reports one sample per request through the ``DownloadMetrics``
protocol, plus a per-resource counter when the path names an image or an
update.
"""

import math
import time

from starlette.types import ASGIApp, Receive, Scope, Send

from swupd_server.api.capturer import ResponseCapturer
from swupd_server.api.paths import canonicalize_path
from swupd_server.api.resources import ImageResource, UpdateResource, match_resource
from swupd_server.core.protocols.download_metrics import DownloadMetrics


def status_and_method_labels(status_code: int | None, method: str) -> tuple[str, str]:
    """Label values for a finished request; a request that sent nothing counts as ``200``."""
    if not status_code:
        status_code = 200
    return str(status_code), method.lower()


def throughput(size: int, duration: float) -> float:
    """Bytes per second with IEEE division semantics at a zero duration."""
    if duration == 0:
        return math.nan if size == 0 else math.inf
    return size / duration


class DownloadMetricsMiddleware:
    """Instrument an inner ASGI app with request, byte and resource metrics."""

    def __init__(self, app: ASGIApp, metrics: DownloadMetrics) -> None:
        self.app = app
        self.metrics = metrics

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        self.metrics.inc_in_flight()
        try:
            capturer = ResponseCapturer(send)
            start = time.perf_counter()
            try:
                await self.app(scope, receive, capturer)
            finally:
                duration = time.perf_counter() - start
                self._record(scope, capturer, duration)
        finally:
            self.metrics.dec_in_flight()

    def _record(self, scope: Scope, capturer: ResponseCapturer, duration: float) -> None:
        code, method = status_and_method_labels(capturer.status_code, scope["method"])
        size = capturer.written

        self.metrics.observe_response(code, method, duration, size, throughput(size, duration))

        resource = match_resource(canonicalize_path(scope["path"]))
        if isinstance(resource, ImageResource):
            self.metrics.observe_image_download(code, resource.release, resource.image)
        elif isinstance(resource, UpdateResource):
            self.metrics.observe_update_download(code, resource.release, resource.version)
