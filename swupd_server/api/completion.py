"""Static file serving with a cheap "already complete" answer.

A client that believes it already holds every byte of a file asks for the
range starting at the file size, ``Range: bytes=<size>-``.  Standard range
handling would reject that as unsatisfiable; this server answers ``200``
with an empty body instead, so the client learns it is up to date without
transferring any content.  Every other request goes to ``StaticFiles``.
"""

import os
import stat
from typing import Optional

import anyio
from starlette.datastructures import Headers
from starlette.middleware.exceptions import ExceptionMiddleware
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp, Receive, Scope, Send

from swupd_server.api.paths import canonicalize_path
from swupd_server.core.logging import logger


class CompletionFileServer:
    """ASGI app serving ``directory`` and short-circuiting completion probes."""

    def __init__(self, directory: str | os.PathLike[str], *, check_dir: bool = True) -> None:
        self.files = StaticFiles(directory=directory, check_dir=check_dir)
        # StaticFiles signals 404/405 by raising; turn those into responses.
        self.fallback: ASGIApp = ExceptionMiddleware(self.files)
        self.logger = logger.with_context(component="completion_file_server")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.fallback(scope, receive, send)
            return

        upath = canonicalize_path(scope["path"])
        scope["path"] = upath

        size = await self._file_size(scope)
        if size is not None and self._is_range_at_end(scope, size):
            self.logger.debug(f"Completion probe satisfied for {upath} ({size} bytes)")
            await Response(status_code=200)(scope, receive, send)
            return

        await self.fallback(scope, receive, send)

    async def _file_size(self, scope: Scope) -> Optional[int]:
        """Size of the regular file the request resolves to, or ``None``."""
        try:
            _, stat_result = await anyio.to_thread.run_sync(
                self.files.lookup_path, self.files.get_path(scope)
            )
        except (OSError, ValueError):
            # ValueError: embedded NUL byte in the path.
            return None
        # Directories are left to StaticFiles even when their size matches.
        if stat_result is None or not stat.S_ISREG(stat_result.st_mode):
            return None
        return stat_result.st_size

    @staticmethod
    def _is_range_at_end(scope: Scope, size: int) -> bool:
        return Headers(scope=scope).get("range") == f"bytes={size}-"
