"""Terminal error formatting for wren servers.

Replaces raw ``logger.exception()`` with diagnostics that highlight the
useful information: the route and the application frames that raised.

Verbosity is controlled by the ``WREN_TRACEBACK`` environment variable:

- ``compact`` (default): error summary plus the last application frames
- ``full``: the complete Python traceback
- ``minimal``: one line with the raising location
"""

from __future__ import annotations

import logging
import os
import traceback as _traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wren.http.request import Request

logger = logging.getLogger("wren.server")

_MAX_APP_FRAMES = 5


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from the application (not stdlib/site-packages/wren)."""
    if "site-packages" in filename:
        return False
    if filename.startswith("<"):
        return False
    normalized = filename.replace("\\", "/")
    if "/wren/" in normalized and "/routes/" not in normalized:
        return False
    stdlib_prefix = os.path.dirname(os.__file__)
    return not filename.startswith(stdlib_prefix)


def format_compact_traceback(exc: BaseException) -> str:
    """Format an error with only the application frames of its traceback.

    Falls back to the last three frames when no application frame exists.
    """
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    app_frames = [f for f in frames if _is_app_frame(f.filename)]
    display_frames = app_frames if app_frames else frames[-3:]

    parts = [f"{type(exc).__name__}: {exc}"]
    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-_MAX_APP_FRAMES:]:
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")
    return "\n".join(parts)


def format_minimal_error(exc: BaseException) -> str:
    """One-line error summary: type, raising location, message."""
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    last = frames[-1] if frames else None
    location = f" at {last.filename}:{last.lineno}" if last else ""
    return f"{type(exc).__name__}{location}: {exc}"


def log_error(
    exc: BaseException,
    request: Request | None = None,
    *,
    prefix: str | None = None,
) -> None:
    """Log a server-side error with the configured traceback verbosity.

    Args:
        exc: The exception that caused the 5xx response.
        request: The request that triggered it, for the log prefix.
        prefix: Explicit log prefix; overrides the one built from *request*.
    """
    if prefix is None:
        prefix = (
            f"500 {request.method} {request.path}" if request is not None else "Server error"
        )

    style = os.environ.get("WREN_TRACEBACK", "compact").lower()
    if style == "full":
        logger.error("%s", prefix, exc_info=exc)
    elif style == "minimal":
        logger.error("%s -- %s", prefix, format_minimal_error(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
