"""Fake DownloadMetrics for testing.

Records all calls in memory so tests can assert on metrics behaviour
without reaching into prometheus-client internals.
"""

from dataclasses import dataclass


@dataclass
class ResponseRecord:
    """Single observed response."""

    code: str
    method: str
    duration: float
    size: int
    throughput: float


@dataclass
class ImageDownloadRecord:
    """Single observed image request."""

    code: str
    release: str
    image: str


@dataclass
class UpdateDownloadRecord:
    """Single observed update request."""

    code: str
    release: str
    version: str


class FakeDownloadMetrics:
    """In-memory spy implementing the DownloadMetrics protocol.

    Usage:
        fake = FakeDownloadMetrics()
        # … inject into DownloadMetricsMiddleware …
        assert fake.in_flight == 0
        assert len(fake.responses) == 1
    """

    def __init__(self) -> None:
        self.in_flight: int = 0
        self.peak_in_flight: int = 0
        self.responses: list[ResponseRecord] = []
        self.images: list[ImageDownloadRecord] = []
        self.updates: list[UpdateDownloadRecord] = []

    def inc_in_flight(self) -> None:
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)

    def dec_in_flight(self) -> None:
        self.in_flight -= 1

    def observe_response(
        self,
        code: str,
        method: str,
        duration: float,
        size: int,
        throughput: float,
    ) -> None:
        self.responses.append(ResponseRecord(code, method, duration, size, throughput))

    def observe_image_download(self, code: str, release: str, image: str) -> None:
        self.images.append(ImageDownloadRecord(code, release, image))

    def observe_update_download(self, code: str, release: str, version: str) -> None:
        self.updates.append(UpdateDownloadRecord(code, release, version))

    # -- test helpers --

    def clear(self) -> None:
        """Reset all recorded state."""
        self.in_flight = 0
        self.peak_in_flight = 0
        self.responses.clear()
        self.images.clear()
        self.updates.clear()
