"""``on_error`` hook that turns common client errors into uniform bodies."""

from typing import Any

from wren.context import RequestContext

# status -> (error, message, code)
_KNOWN_ERRORS: dict[int, tuple[str, str, str]] = {
    401: ("Unauthorized", "Authentication token is invalid or missing", "AUTH_REQUIRED"),
    403: ("Forbidden", "You do not have permission to access this resource", "FORBIDDEN"),
    429: ("Too Many Requests", "Request rate limit exceeded", "RATE_LIMIT_EXCEEDED"),
}


def status_error_handler(ctx: RequestContext, error: BaseException) -> dict[str, Any] | None:
    """Map 401/403/429 errors to ``{error, message, code, status}``.

    Returns ``None`` for every other error so later hooks (or the default
    error response) take over.
    """
    status = getattr(error, "status", None)
    known = _KNOWN_ERRORS.get(status) if isinstance(status, int) else None
    if known is None:
        return None
    title, message, code = known
    return {"error": title, "message": message, "code": code, "status": status}
