"""Runner for the update content server and its metrics sidecar."""

import asyncio
import os

import uvicorn
from starlette.types import ASGIApp

from swupd_server.api.completion import CompletionFileServer
from swupd_server.api.middleware import DownloadMetricsMiddleware
from swupd_server.core.config import Settings, get_settings
from swupd_server.core.logging import configure_logging
from swupd_server.core.logging import logger as global_logger
from swupd_server.core.metrics_service import build_metrics_service
from swupd_server.core.protocols.download_metrics import DownloadMetrics


def create_app(root: str | os.PathLike[str], metrics: DownloadMetrics) -> ASGIApp:
    """Build the instrumented handler chain serving ``root``."""
    return DownloadMetricsMiddleware(CompletionFileServer(root), metrics)


async def main(settings: Settings | None = None) -> None:
    """Serve updates and metrics from a single event loop.

    Raises:
        e (Exception): If either server fails to start or stops with an error.
    """
    settings = settings or get_settings()
    logger = global_logger.with_context(context_base="swupd_server", operation="runner")

    metrics_service = build_metrics_service(settings)
    app = create_app(settings.SERVE_ROOT, metrics_service.downloads)
    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=settings.HOST,
            port=settings.PORT,
            lifespan="off",
            log_config=None,
            access_log=False,
        )
    )

    try:
        await metrics_service.start(host=settings.METRICS_HOST, port=settings.METRICS_PORT)
    except Exception as e:
        logger.error(f"Metrics server failed with: {e}")
        raise e

    logger.info(f"Serving updates on {settings.HOST}:{settings.PORT}/ from {settings.SERVE_ROOT}")
    try:
        await server.serve()
    except Exception as e:
        logger.error(f"Updates server failed with: {e}")
        raise e
    finally:
        await metrics_service.stop()


def run() -> None:
    """Console entry point."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, local=settings.LOCAL_DEVELOPMENT)
    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        print("Shutdown requested... exiting.")


if __name__ == "__main__":
    run()
