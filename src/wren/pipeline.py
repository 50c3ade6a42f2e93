"""Request pipeline -- runs one route handler inside its hooks.

``define_event_handler(handler, middleware)`` returns an ``EventHandler``:
an endpoint the router can dispatch to with ``(request, response)``.
Each call runs exactly one request through::

    START -> ON_REQUEST -> HANDLER -> ON_BEFORE_RESPONSE -> RESPONDED
                  \\            \\               \\
                   +------------+---------------+--> ERROR -> ON_ERROR -> RESPONDED

- ``on_request`` hooks run in order; return values are ignored. Raising
  skips the remaining hooks and the handler.
- The handler's return value is the pipeline result.
- ``on_before_response`` hooks run in order with ``(context, result)``;
  a non-``None`` return replaces the result.
- A non-``None`` final result is sent as JSON (status 200 unless the
  handler changed it); ``None`` sends nothing, the handler is assumed to
  have written through ``context.response``.
- On error, ``on_error`` hooks run in order with ``(context, error)``
  until one returns a non-empty mapping, which is sent with its
  ``status`` (default 500). A hook that raises is logged and skipped.
  Without a handled mapping the error's own ``status`` (default 500) and
  ``{"error": message}`` are sent.

One log line is written per request: ``GET /items/1 - 3ms - 200``, or
``ERROR``/``ERROR (handled)`` with the error message.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from wren._internal.invoke import invoke
from wren._internal.types import Handler
from wren.context import RequestContext
from wren.errors import HTTPError
from wren.http.request import Request
from wren.middleware.protocol import MiddlewareSet
from wren.server.errors import error_payload, error_status
from wren.server.handler import send_result
from wren.server.sender import ResponseWriter
from wren.server.terminal_errors import log_error

logger = logging.getLogger("wren.pipeline")


async def run_request_hooks(hooks: tuple[Any, ...], context: RequestContext) -> None:
    """Run ``on_request`` hooks sequentially; return values are ignored."""
    for hook in hooks:
        await invoke(hook, context)


async def run_response_hooks(
    hooks: tuple[Any, ...],
    context: RequestContext,
    result: Any,
) -> Any:
    """Thread *result* through ``on_before_response`` hooks."""
    current = result
    for hook in hooks:
        replaced = await invoke(hook, context, current)
        if replaced is not None:
            current = replaced
    return current


async def run_error_hooks(
    hooks: tuple[Any, ...],
    context: RequestContext,
    error: BaseException,
) -> dict[str, Any] | None:
    """Run ``on_error`` hooks until one returns a non-empty mapping.

    Exceptions raised by a hook are logged and treated as "not handled".
    """
    for hook in hooks:
        try:
            handled = await invoke(hook, context, error)
        except Exception as hook_exc:
            logger.warning(
                "Error in on_error hook %s: %s",
                getattr(hook, "__name__", repr(hook)),
                hook_exc,
            )
            continue
        if isinstance(handled, Mapping) and handled:
            return dict(handled)
        if handled:
            logger.warning(
                "on_error hook %s returned %s, expected a mapping; ignoring it",
                getattr(hook, "__name__", repr(hook)),
                type(handled).__name__,
            )
    return None


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class EventHandler:
    """A route handler bound to its ``MiddlewareSet``.

    Calling it with ``(request, response)`` runs the full pipeline for
    one request. Instances are immutable and hold no per-request state.
    """

    __slots__ = ("handler", "middleware")

    def __init__(self, handler: Handler, middleware: MiddlewareSet | None = None) -> None:
        if not callable(handler):
            msg = f"handler must be callable, got {type(handler).__name__}"
            raise TypeError(msg)
        self.handler = handler
        self.middleware = middleware or MiddlewareSet()

    def __repr__(self) -> str:
        name = getattr(self.handler, "__qualname__", repr(self.handler))
        return f"EventHandler({name})"

    @property
    def __name__(self) -> str:
        return getattr(self.handler, "__name__", type(self.handler).__name__)

    def with_middleware(self, extra: MiddlewareSet) -> EventHandler:
        """Return a new EventHandler whose hooks run before *extra*'s."""
        return EventHandler(self.handler, self.middleware.combine(extra))

    async def __call__(self, request: Request, response: ResponseWriter) -> None:
        start = time.perf_counter()
        context = RequestContext.from_request(request, response)
        await self.run(context, start)

    async def run(self, context: RequestContext, start: float | None = None) -> None:
        """Run the pipeline against an already-built context."""
        if start is None:
            start = time.perf_counter()
        hooks = self.middleware
        response = context.response
        try:
            await context.load_body()
            await run_request_hooks(hooks.on_request, context)
            result = await invoke(self.handler, context)
            result = await run_response_hooks(hooks.on_before_response, context, result)
            if result is not None and not response.headers_sent:
                await send_result(response, result)
        except Exception as exc:
            await self._respond_error(context, exc, start)
            return

        logger.info(
            "%s %s - %dms - %d",
            context.method,
            context.path,
            _elapsed_ms(start),
            response.status_code,
        )

    async def _respond_error(
        self,
        context: RequestContext,
        exc: Exception,
        start: float,
    ) -> None:
        response = context.response
        handled = await run_error_hooks(self.middleware.on_error, context, exc)

        if handled is not None:
            status = handled.get("status")
            if not isinstance(status, int):
                status = 500
            logger.log(
                logging.ERROR if status >= 500 else logging.WARNING,
                "%s %s - %dms - ERROR (handled): %s",
                context.method,
                context.path,
                _elapsed_ms(start),
                exc,
            )
            if not response.headers_sent:
                await response.json(handled, status=status)
            return

        status = error_status(exc)
        prefix = f"{context.method} {context.path} - {_elapsed_ms(start)}ms - ERROR"
        if status >= 500:
            log_error(exc, context.request, prefix=f"{prefix}: {exc}")
        else:
            logger.warning("%s: %s", prefix, exc)

        if response.headers_sent:
            return
        if isinstance(exc, HTTPError):
            for name, value in exc.headers:
                response.set_header(name, value)
        await response.json(error_payload(exc), status=status)


def define_event_handler(
    handler: Handler,
    middleware: MiddlewareSet | Mapping[str, Any] | None = None,
    *,
    on_request: Any = None,
    on_before_response: Any = None,
    on_error: Any = None,
) -> EventHandler:
    """Wrap a context handler in the request pipeline.

    Hooks can be given as a ``MiddlewareSet``, as a mapping with
    ``on_request``/``on_before_response``/``on_error`` keys, or as keyword
    arguments (keyword hooks run after the ones in *middleware*)::

        get = define_event_handler(
            show_item,
            on_request=require_auth,
            on_before_response=[add_timestamp, add_response_metadata],
            on_error=status_error_handler,
        )
    """
    if middleware is None:
        hooks = MiddlewareSet()
    elif isinstance(middleware, MiddlewareSet):
        hooks = middleware
    else:
        hooks = MiddlewareSet.from_mapping(middleware)
    extra = MiddlewareSet.build(
        on_request=on_request,
        on_before_response=on_before_response,
        on_error=on_error,
    )
    return EventHandler(handler, hooks.combine(extra))
