"""Default error responses for the substrate.

Used when no pipeline handled an error: router misses (404/405),
endpoints bound without hooks, and failures while reading the request.
Every error body is JSON with at least an ``error`` field.
"""

import logging
from typing import Any

from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.server.terminal_errors import log_error

logger = logging.getLogger("wren.server")


def error_payload(exc: BaseException, default_message: str = "Internal Server Error") -> dict[str, Any]:
    """Build the generic ``{"error": message}`` body for an exception.

    ``details`` is included when the exception carries any.
    """
    message = getattr(exc, "message", None) or str(exc) or default_message
    payload: dict[str, Any] = {"error": message}
    details = getattr(exc, "details", None)
    if details is not None:
        payload["details"] = details
    return payload


def error_status(exc: BaseException) -> int:
    """The exception's integer ``status`` attribute, else 500."""
    status = getattr(exc, "status", None)
    if isinstance(status, int) and 400 <= status <= 599:
        return status
    return 500


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a JSON Response."""
    logger.debug("%d %s %s -- %s", exc.status, request.method, request.path, exc.message)
    response = Response.json_response(error_payload(exc, f"Error {exc.status}"), exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(exc: BaseException, request: Request) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    log_error(exc, request)
    return Response.json_response({"error": "Internal Server Error"}, 500)


def handle_exception(exc: BaseException, request: Request) -> Response:
    """Surface an exception's own 4xx ``status``; anything else is a 500."""
    status = error_status(exc)
    if status >= 500:
        return handle_internal_error(exc, request)
    logger.debug("%d %s %s -- %s", status, request.method, request.path, exc)
    return Response.json_response(error_payload(exc), status)
