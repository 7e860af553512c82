"""DownloadMetrics protocol for artifact traffic instrumentation.

Abstracts metric collection so the middleware depends on a protocol rather
than a concrete library.  Production uses Prometheus; tests inject a fake
that records calls in memory.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class DownloadMetrics(Protocol):
    """Protocol for per-request artifact server metrics."""

    def inc_in_flight(self) -> None:
        """Increment the requests-in-flight gauge."""
        ...

    def dec_in_flight(self) -> None:
        """Decrement the requests-in-flight gauge."""
        ...

    def observe_response(
        self,
        code: str,
        method: str,
        duration: float,
        size: int,
        throughput: float,
    ) -> None:
        """Record a completed response.

        Args:
            code: Status code as a string ("200", "404", …).
            method: Lower-cased HTTP method.
            duration: Wall-clock handling time in seconds.
            size: Response body bytes accepted by the transport.
            throughput: ``size / duration`` in bytes per second.
        """
        ...

    def observe_image_download(self, code: str, release: str, image: str) -> None:
        """Record a request for ``/images/<release>/<image>``."""
        ...

    def observe_update_download(self, code: str, release: str, version: str) -> None:
        """Record a request for ``/update/<release>/<version>/…``."""
        ...
