"""Wren application class.

Mutable during setup (route registration, discovery, lifecycle hooks).
Frozen at runtime when ``app.run()`` or ``__call__()`` is first invoked.
"""

from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.types import Endpoint, Handler
from wren.config import AppConfig
from wren.discovery.registrar import EventHandlerFactory, Registrar, context_adapter
from wren.discovery.scanner import discover
from wren.discovery.types import HttpMethod, RegisteredRoute
from wren.errors import RegistrationError
from wren.logs import configure_logging
from wren.middleware.protocol import MiddlewareSet
from wren.pipeline import define_event_handler
from wren.routing.route import MATCH_ALL, Route
from wren.routing.router import Router
from wren.server.handler import handle_request

logger = logging.getLogger("wren.server")

_METHODS = frozenset(m.value for m in HttpMethod) | {MATCH_ALL}


class App:
    """The wren application.

    Routes are validated as they are added, so a bad pattern or a
    duplicate registration fails at the call site with
    ``RegistrationError``. The router is compiled on first use.

    Thread safety:
        The setup phase is single-threaded. The freeze transition uses a
        Lock + double-check so exactly one thread compiles the app, even
        when several ASGI workers receive their first request at once.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._router = Router()
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Route registration --

    def add_route(
        self,
        method: str,
        pattern: str,
        endpoint: Endpoint,
        source: str | None = None,
    ) -> None:
        """Register a substrate endpoint ``(request, response)`` for one method.

        ``method`` is one of the seven HTTP verbs or ``"ALL"``. Raises
        ``RegistrationError`` for an unknown method, a malformed pattern,
        or a method + pattern pair that is already registered.
        """
        self._check_not_frozen()
        verb = method.upper()
        if verb not in _METHODS:
            raise RegistrationError(method, pattern, "unsupported HTTP method")
        self._router.add(Route(pattern, endpoint, frozenset({verb}), source=source))

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        on_request: Any = None,
        on_before_response: Any = None,
        on_error: Any = None,
    ) -> Callable[[Handler], Handler]:
        """Register a context handler via decorator.

        Usage::

            @app.route("/items/:id", on_request=require_auth)
            async def show_item(ctx):
                return {"id": ctx.params["id"]}

        With hooks the handler runs through the request pipeline;
        without, it is bound directly.
        """
        hooks = MiddlewareSet.build(
            on_request=on_request,
            on_before_response=on_before_response,
            on_error=on_error,
        )

        def decorator(func: Handler) -> Handler:
            endpoint = define_event_handler(func, hooks) if hooks else context_adapter(func)
            source = getattr(func, "__qualname__", None)
            for method in methods or ["GET"]:
                self.add_route(method, path, endpoint, source=source)
            return func

        return decorator

    def mount_routes(
        self,
        routes_dir: str | Path | None = None,
        modules_dir: str | Path | None = None,
        *,
        event_handler: EventHandlerFactory = define_event_handler,
    ) -> list[RegisteredRoute]:
        """Discover route files and register them.

        Scans *routes_dir* (global routes), then every
        ``<modules_dir>/<module>/routes`` tree mounted under
        ``config.module_mount_prefix``. Defaults come from the config.
        Files that fail to load or register are logged and skipped.
        """
        self._check_not_frozen()
        routes_root = Path(routes_dir if routes_dir is not None else self.config.routes_dir)
        modules_root = Path(modules_dir if modules_dir is not None else self.config.modules_dir)

        logger.info("Starting route loader")
        candidates = discover(
            routes_root,
            modules_root,
            mount_prefix=self.config.module_mount_prefix,
            extension=self.config.route_extension,
        )
        registrar = Registrar(self, event_handler=event_handler, modules_root=modules_root)
        registered = registrar.register_all(candidates)
        logger.info("Route loading completed: %d route(s)", len(registered))
        return registered

    @property
    def routes(self) -> list[Route]:
        """Registered routes, in registration order."""
        return self._router.routes

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start the server.

        Debug mode runs a single worker with auto-reload.

        Args:
            host: Override bind host.
            port: Override bind port.
        """
        self._ensure_frozen()
        from wren.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            max_body_size=self.config.max_content_length,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol."""
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        result = hook()
                        if inspect.isawaitable(result):
                            await result
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    result = hook()
                    if inspect.isawaitable(result):
                        await result
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._router.compile()
            self._frozen = True
            logger.debug("App frozen with %d route(s)", len(self._router.routes))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and hooks before calling app.run()."
            )
            raise RuntimeError(msg)


def create_app(config: AppConfig | None = None, *, mount: bool = True) -> App:
    """Build an app from *config* (default: ``AppConfig.from_env()``).

    Configures ``wren`` logging and, unless ``mount=False``, mounts the
    configured route directories.
    """
    cfg = config if config is not None else AppConfig.from_env()
    configure_logging(cfg.log_level, cfg.log_format)
    app = App(cfg)
    if mount:
        app.mount_routes()
    return app
