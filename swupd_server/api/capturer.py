"""Transparent recorder around an ASGI ``send`` callable."""

from typing import Optional

from starlette.datastructures import Headers
from starlette.types import Message, Send

_START = "http.response.start"
_BODY = "http.response.body"
_PATHSEND = "http.response.pathsend"


class ResponseCapturer:
    """Forward every response message unchanged while recording the outcome.

    ``status_code`` is the first status sent (``None`` until one is), and
    ``written`` is the number of body bytes the wrapped ``send`` accepted.
    A body sent before any start message gets an implicit ``200`` start
    forwarded ahead of it.
    """

    def __init__(self, send: Send) -> None:
        self._send = send
        self.status_code: Optional[int] = None
        self.written: int = 0
        self._declared_length: int = 0

    async def __call__(self, message: Message) -> None:
        message_type = message["type"]

        if message_type == _START:
            if self.status_code is None:
                self.status_code = message["status"]
                self._declared_length = _content_length(message)
            await self._send(message)
            return

        if message_type == _BODY:
            await self._ensure_started()
            await self._send(message)
            self.written += len(message.get("body", b""))
            return

        if message_type == _PATHSEND:
            await self._ensure_started()
            await self._send(message)
            self.written += self._declared_length
            return

        await self._send(message)

    async def _ensure_started(self) -> None:
        if self.status_code is None:
            self.status_code = 200
            await self._send({"type": _START, "status": 200, "headers": []})


def _content_length(message: Message) -> int:
    value = Headers(raw=message.get("headers", [])).get("content-length")
    try:
        return int(value) if value is not None else 0
    except ValueError:
        return 0
