"""Logging setup for wren applications.

Every wren module logs through a named stdlib logger under the ``wren``
namespace (``wren.server``, ``wren.discovery``, ``wren.pipeline``,
``wren.middleware``). ``configure_logging`` installs one stream handler
on the ``wren`` logger with either a human-readable or a JSON line
format. Calling it again replaces the handler instead of stacking them.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

_LEVELS: dict[str, int] = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Attributes present on every LogRecord; anything else came from ``extra=``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

_HANDLER_MARKER = "_wren_handler"


class JSONFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def resolve_level(level: str | int) -> int:
    """Map ``"info"``/``"warn"``/... (or a numeric level) to a logging level."""
    if isinstance(level, int):
        return level
    try:
        return _LEVELS[level.lower()]
    except KeyError:
        msg = f"Unknown log level {level!r}; expected one of {', '.join(_LEVELS)}"
        raise ValueError(msg) from None


def configure_logging(
    level: str | int = "info",
    fmt: str = "text",
    *,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ``wren`` logger and return it."""
    logger = logging.getLogger("wren")
    logger.setLevel(resolve_level(level))

    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    setattr(handler, _HANDLER_MARKER, True)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    logger.addHandler(handler)
    return logger
