"""MetricsRenderer protocol for serializing collected metrics.

Keeps scrape-format concerns (exposition format, content negotiation)
out of the DownloadMetrics collection protocol.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class MetricsRenderer(Protocol):
    """Protocol for rendering collected metrics into a scrapeable format."""

    def render(self, accept: Optional[str] = None) -> tuple[bytes, str]:
        """Serialize all collected metrics.

        Args:
            accept: The scraper's ``Accept`` header, if any.

        Returns:
            The encoded payload and its MIME type.
        """
        ...
