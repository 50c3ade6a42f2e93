"""Module registrar -- turns manifest entries into app routes.

For each candidate the registrar loads the exports once, decides which
verbs to bind, wraps handlers that declare hooks with the event-handler
factory, and calls ``app.add_route``. Problems are contained to the
candidate that caused them: load failures, missing handlers and
rejected patterns are logged and the scan goes on.

Binding rules::

    items/[id].get.py   exports get            -> GET    /items/:id  (get)
    items/[id].get.py   exports default        -> GET    /items/:id  (default)
    items/index.py      exports get, post      -> GET + POST /items
    items/index.py      exports default only   -> ALL    /items      (default)
    gateway/[module].py exports default        -> ALL    /gateway/:module/*
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, Protocol

from wren._internal.invoke import invoke
from wren._internal.types import Endpoint, Handler
from wren.context import RequestContext
from wren.discovery.conventions import HTTP_METHODS, clean_path
from wren.discovery.manifest import ManifestEntry, RouteManifest, load_entry
from wren.discovery.proxy import ModuleProxy
from wren.discovery.types import (
    GLOBAL_PREFIX,
    ModuleExports,
    ModuleProxyBinding,
    RegisteredRoute,
    RouteCandidate,
)
from wren.http.request import Request
from wren.middleware.protocol import MiddlewareSet
from wren.pipeline import EventHandler, define_event_handler
from wren.routing.route import MATCH_ALL
from wren.server.sender import ResponseWriter

logger = logging.getLogger("wren.discovery")

type EventHandlerFactory = Callable[[Handler, MiddlewareSet], Endpoint]


class RouteTarget(Protocol):
    """The part of the app the registrar needs."""

    def add_route(
        self,
        method: str,
        pattern: str,
        endpoint: Endpoint,
        source: str | None = None,
    ) -> None: ...


def context_adapter(handler: Handler) -> Endpoint:
    """Bind a hook-less handler: build the context, call it, return its result.

    No hooks run and no request line is logged; the substrate sends the
    result and turns exceptions into error responses.
    """

    @functools.wraps(handler)
    async def endpoint(request: Request, response: ResponseWriter) -> Any:
        context = RequestContext.from_request(request, response)
        await context.load_body()
        return await invoke(handler, context)

    return endpoint


class Registrar:
    """Registers discovered route files with an app.

    Args:
        app: Anything with ``add_route(method, pattern, endpoint, source)``.
        event_handler: Factory wrapping a handler and its hooks into an
            endpoint. Defaults to ``define_event_handler``.
        modules_root: Directory module proxies resolve module names against.
        project_root: Base for the relative file paths in log lines.
    """

    __slots__ = ("_app", "_event_handler", "_modules_root", "_project_root", "_registered")

    def __init__(
        self,
        app: RouteTarget,
        *,
        event_handler: EventHandlerFactory = define_event_handler,
        modules_root: str | Path | None = None,
        project_root: str | Path | None = None,
    ) -> None:
        self._app = app
        self._event_handler = event_handler
        self._modules_root = Path(modules_root) if modules_root is not None else None
        self._project_root = Path(project_root) if project_root is not None else Path.cwd()
        self._registered: list[RegisteredRoute] = []

    @property
    def registered(self) -> list[RegisteredRoute]:
        """Every route registered so far, in order."""
        return list(self._registered)

    # -- Entry points --

    def register(self, candidate: RouteCandidate) -> list[RegisteredRoute]:
        """Load and register one route file."""
        return self.register_entry(load_entry(candidate))

    def register_all(self, candidates: Iterable[RouteCandidate]) -> list[RegisteredRoute]:
        """Register candidates in order; returns the routes that made it."""
        routes: list[RegisteredRoute] = []
        for candidate in candidates:
            routes.extend(self.register(candidate))
        return routes

    def register_manifest(self, manifest: RouteManifest) -> list[RegisteredRoute]:
        routes: list[RegisteredRoute] = []
        for entry in manifest:
            routes.extend(self.register_entry(entry))
        return routes

    def register_entry(self, entry: ManifestEntry) -> list[RegisteredRoute]:
        """Register one manifest entry. Failed entries register nothing."""
        if entry.exports is None:
            return []
        if entry.parsed.is_module_proxy:
            return self._register_proxy(entry, entry.exports)
        if entry.parsed.http_methods:
            return self._register_specific(entry, entry.exports)
        return self._register_exported(entry, entry.exports)

    # -- Binding rules --

    def _register_specific(self, entry: ManifestEntry, exports: ModuleExports) -> list[RegisteredRoute]:
        routes = []
        for method in entry.parsed.http_methods:
            handler = exports.for_method(method)
            if handler is None:
                continue
            route = self._bind(entry, method.value, entry.parsed.url_pattern, handler, exports.middleware)
            if route is not None:
                routes.append(route)
        return routes

    def _register_exported(self, entry: ManifestEntry, exports: ModuleExports) -> list[RegisteredRoute]:
        routes = []
        for method in HTTP_METHODS:
            handler = exports.handlers.get(method)
            if handler is None:
                continue
            route = self._bind(entry, method.value, entry.parsed.url_pattern, handler, exports.middleware)
            if route is not None:
                routes.append(route)

        if exports.default is not None and not exports.handlers:
            route = self._bind(
                entry, MATCH_ALL, entry.parsed.url_pattern, exports.default, exports.middleware
            )
            if route is not None:
                routes.append(route)
        return routes

    def _register_proxy(self, entry: ManifestEntry, exports: ModuleExports) -> list[RegisteredRoute]:
        handler = exports.proxy_handler
        if handler is None:
            logger.error(
                "Module proxy %s must export a default function or handler",
                entry.candidate.full_path,
            )
            return []
        if self._modules_root is None:
            logger.error(
                "Module proxy %s needs a modules directory, skipping", entry.candidate.full_path
            )
            return []

        if exports.middleware:
            logger.warning(
                "Module proxy %s declares hooks; proxies do not run them",
                entry.candidate.full_path,
            )

        binding = ModuleProxyBinding(
            mount_path=clean_path(entry.parsed.url_pattern),
            modules_root=self._modules_root,
            handler=handler,
            http_methods=entry.parsed.http_methods,
        )
        endpoint = ModuleProxy(binding)
        methods = [m.value for m in binding.http_methods] or [MATCH_ALL]
        routes = []
        for method in methods:
            route = self._add(entry, method, binding.pattern, endpoint, label="proxy")
            if route is not None:
                routes.append(route)
        return routes

    # -- Registration --

    def _wrap(self, handler: Handler, middleware: MiddlewareSet) -> Endpoint:
        if isinstance(handler, EventHandler):
            # Already pipelined by the route file itself
            return handler.with_middleware(middleware) if middleware else handler
        if middleware:
            return self._event_handler(handler, middleware)
        return context_adapter(handler)

    def _bind(
        self,
        entry: ManifestEntry,
        method: str,
        pattern: str,
        handler: Handler,
        middleware: MiddlewareSet,
    ) -> RegisteredRoute | None:
        try:
            endpoint = self._wrap(handler, middleware)
        except Exception as exc:
            logger.error("Error registering %s %s: %s", method, clean_path(pattern), exc)
            return None
        return self._add(entry, method, pattern, endpoint)

    def _add(
        self,
        entry: ManifestEntry,
        method: str,
        pattern: str,
        endpoint: Endpoint,
        *,
        label: str | None = None,
    ) -> RegisteredRoute | None:
        path = clean_path(pattern)
        source = self._relative(entry.candidate.full_path)
        try:
            self._app.add_route(method, path, endpoint, source=source)
        except Exception as exc:
            logger.error("Error registering %s %s: %s", method, path, exc)
            return None

        prefix = entry.candidate.module_prefix
        if label is not None:
            prefix = f"{prefix}-{label}"
        tag = "" if prefix == GLOBAL_PREFIX else f"[{prefix}] "
        logger.info("%sLoaded route: %-6s %s -> %s", tag, method, path, source)

        route = RegisteredRoute(
            http_method=method,
            url_pattern=path,
            endpoint=endpoint,
            source=source,
            module_prefix=entry.candidate.module_prefix,
        )
        self._registered.append(route)
        return route

    def _relative(self, path: Path) -> str:
        try:
            return path.resolve().relative_to(self._project_root.resolve()).as_posix()
        except ValueError:
            return path.as_posix()
