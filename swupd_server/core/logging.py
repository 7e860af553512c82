"""Contextual logging for the update server.

Wraps the stdlib logger in a ``LoggerAdapter`` so callers can bind
structured fields once (``logger.with_context(component="completion")``)
and have them rendered on every record the child emits.
"""

import logging
import sys
from typing import Any, MutableMapping

_LOGGER_NAME = "swupd_server"

_PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(message)s%(context)s"
_STRUCTURED_FORMAT = (
    'time="%(asctime)s" level=%(levelname)s logger=%(name)s msg="%(message)s"%(context)s'
)


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter carrying a dict of context fields."""

    def __init__(self, logger: logging.Logger, extra: dict[str, Any] | None = None) -> None:
        super().__init__(logger, extra or {})

    def with_context(self, **fields: Any) -> "ContextualLogger":
        """Return a child logger with ``fields`` merged into the current context."""
        return ContextualLogger(self.logger, {**self.extra, **fields})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["context"] = _render_context(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs


def _render_context(fields: dict[str, Any]) -> str:
    if not fields:
        return ""
    return " " + " ".join(f"{key}={value}" for key, value in fields.items())


class _ContextDefaultFilter(logging.Filter):
    """Ensure ``%(context)s`` resolves for records from non-contextual loggers."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = ""
        return True


def configure_logging(level: str = "INFO", *, local: bool = False) -> None:
    """Install a single stream handler on the root logger.

    Args:
        level: Root log level name.
        local: Use the human-readable format instead of the key=value one.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_PLAIN_FORMAT if local else _STRUCTURED_FORMAT))
    handler.addFilter(_ContextDefaultFilter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())


logger = ContextualLogger(logging.getLogger(_LOGGER_NAME))
