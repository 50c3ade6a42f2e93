"""Wren -- file-system routing with per-route request pipelines.

Drop route files into a directory and serve them::

    routes/
        health.get.py          -> GET /health
        items/[id].get.py      -> GET /items/:id
        items/index.py         -> every verb it exports, at /items

A route file exports handlers named after HTTP verbs (or ``default``),
and optionally ``on_request``, ``on_before_response`` and ``on_error``
hooks::

    from wren.middleware import add_timestamp, require_auth

    on_request = require_auth
    on_before_response = add_timestamp

    async def get(ctx):
        return {"id": ctx.params["id"]}

Serve it::

    from wren import create_app

    app = create_app()
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ClientError",
    "ConfigurationError",
    "EventHandler",
    "HTTPError",
    "LoadError",
    "MethodNotAllowed",
    "NotFound",
    "RegistrationError",
    "Request",
    "RequestContext",
    "Response",
    "ServerError",
    "WrenError",
    "create_app",
    "define_event_handler",
]

_ERRORS = frozenset(
    {
        "ClientError",
        "ConfigurationError",
        "HTTPError",
        "LoadError",
        "MethodNotAllowed",
        "NotFound",
        "RegistrationError",
        "ServerError",
        "WrenError",
    }
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name in ("App", "create_app"):
        from wren import app as app_module

        return getattr(app_module, name)

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name in ("EventHandler", "define_event_handler"):
        from wren import pipeline

        return getattr(pipeline, name)

    if name == "RequestContext":
        from wren.context import RequestContext

        return RequestContext

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name in _ERRORS:
        from wren import errors

        return getattr(errors, name)

    msg = f"module 'wren' has no attribute {name!r}"
    raise AttributeError(msg)
