"""``wren run`` -- start the server for an app import string."""

import argparse
import sys

from wren.cli._resolve import resolve_app


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it; CLI flags override the app config."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        app.run(host=args.host, port=args.port)
    except ImportError as exc:
        print(
            f"Error: {exc}. Install the server extra: pip install 'wren[server]'",
            file=sys.stderr,
        )
        raise SystemExit(1) from exc
