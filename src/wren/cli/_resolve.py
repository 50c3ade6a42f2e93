"""App import resolution -- resolves ``"module:attribute"`` strings to App instances.

Shared by ``wren run`` and ``wren routes``.
"""

import importlib
import sys
from pathlib import Path

from wren.app import App


def resolve_app(import_string: str) -> App:
    """Resolve an import string to a wren App instance.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"app"``. A callable that is not an App (such as
    ``create_app``) is called as a factory. The current directory is put
    on ``sys.path`` first so project-local modules import.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a wren ``App``.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, App):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, App):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a wren.App instance"
        raise TypeError(msg)

    return obj
