"""Server entry point.

Starts a pounce ASGI server with the live wren App object.
"""


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    workers: int = 1,
) -> None:
    """Start a pounce server with the given wren App.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``),
    but wren has a live ``App`` object. We use ``pounce.Server``
    directly with the ASGI callable.

    Args:
        app: ASGI callable (wren App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
        workers: Worker count (reload mode always uses one).
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1 if reload else workers,
        reload=reload,
    )
    server = Server(config, app)
    server.run()
