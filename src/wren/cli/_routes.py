"""``wren routes`` -- list routes without starting a server.

Either scans route directories (defaults from ``AppConfig.from_env()``)
or resolves an app import string, then prints METHOD, PATH and SOURCE.
"""

import argparse
import sys

from wren.app import App
from wren.cli._resolve import resolve_app
from wren.config import AppConfig
from wren.errors import ConfigurationError


def _build_app(args: argparse.Namespace) -> App:
    if args.app:
        try:
            return resolve_app(args.app)
        except (ModuleNotFoundError, AttributeError, TypeError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            raise SystemExit(1) from exc
    try:
        config = AppConfig.from_env()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    app = App(config)
    app.mount_routes(args.routes_dir, args.modules_dir)
    return app


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of the app's routes in registration order."""
    app = _build_app(args)
    routes = app.routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str]] = []
    for route in routes:
        methods_str = ", ".join(sorted(route.methods))
        source = route.source or getattr(route.endpoint, "__name__", repr(route.endpoint))
        rows.append((methods_str, route.path, source))

    max_methods = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "SOURCE"))
    sep_len = max_methods + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for methods_str, path, source in rows:
        print(fmt.format(methods_str, path, source))
