"""Fake MetricsRenderer for testing."""

from typing import Optional

from swupd_server.core.protocols.metrics_renderer import MetricsRenderer

FAKE_PAYLOAD = b"# fake metrics\n"


class FakeMetricsRenderer(MetricsRenderer):
    """In-memory spy returning a fixed payload and remembering each ``Accept`` header."""

    def __init__(self) -> None:
        self.accept_headers: list[Optional[str]] = []

    @property
    def render_calls(self) -> int:
        return len(self.accept_headers)

    def render(self, accept: Optional[str] = None) -> tuple[bytes, str]:
        self.accept_headers.append(accept)
        return FAKE_PAYLOAD, "text/plain"
