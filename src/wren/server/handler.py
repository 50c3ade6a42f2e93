"""ASGI handler -- translates ASGI scope/messages to wren types.

The only component that touches raw ASGI requests directly. Converts
scope dicts to typed Request objects, matches the router, calls the
endpoint with ``(request, response)``, and makes sure exactly one
response goes back through ASGI ``send()``.
"""

from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.router import Router
from wren.server.errors import handle_exception, handle_http_error
from wren.server.sender import ResponseWriter


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    max_body_size: int | None = None,
) -> None:
    """Process a single HTTP request."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive, max_body_size=max_body_size)
    response = ResponseWriter(send, head_only=request.method == "HEAD")

    try:
        match = router.match(request.method, request.path)
        routed = request.with_path_params(match.path_params)
        result = await match.route.endpoint(routed, response)
        if result is not None and not response.headers_sent:
            await send_result(response, result)
    except HTTPError as exc:
        if not response.headers_sent:
            await response.send_response(handle_http_error(exc, request))
    except Exception as exc:
        error_response = handle_exception(exc, request)
        if not response.headers_sent:
            await response.send_response(error_response)

    # An endpoint that wrote nothing still owes the client a response
    if not response.finished:
        await response.end()


async def send_result(response: ResponseWriter, result: Any) -> None:
    """Send an endpoint's return value.

    ``Response`` values are sent as-is, ``bytes`` and ``str`` as plain
    bodies, anything else is serialized as JSON.
    """
    if isinstance(result, Response):
        await response.send_response(result)
    elif isinstance(result, bytes):
        await response.send(result, content_type="application/octet-stream")
    elif isinstance(result, str):
        await response.send(result)
    else:
        await response.json(result)
