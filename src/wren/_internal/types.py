"""Shared type aliases used across wren modules."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from wren.context import RequestContext
    from wren.http.request import Request
    from wren.server.sender import ResponseWriter

# Substrate endpoint -- what the router dispatches to
Endpoint: TypeAlias = Callable[["Request", "ResponseWriter"], Awaitable[Any]]

# Route handler -- receives the request context, returns a JSON-able result
Handler: TypeAlias = Callable[["RequestContext"], Any]

# Pipeline hooks
RequestHook: TypeAlias = Callable[["RequestContext"], Any]
ResponseHook: TypeAlias = Callable[["RequestContext", Any], Any]
ErrorHook: TypeAlias = Callable[["RequestContext", BaseException], Any]
