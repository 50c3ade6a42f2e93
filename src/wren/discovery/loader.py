"""Route module loader -- imports a route file and validates its exports.

A route file is a plain Python module. Recognised module-level names::

    get, post, put, delete, patch, options, head   # verb handlers (upper-case accepted)
    default                                        # fallback / match-all handler
    handler                                        # module proxy handler
    on_request, on_before_response, on_error       # hooks (callable or list)

Each file is imported under its own synthetic module name so files with
the same name in different directories never collide.
"""

import importlib.util
import itertools
import logging
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

from wren.discovery.types import HttpMethod, ModuleExports
from wren.errors import LoadError
from wren.middleware.protocol import HOOK_NAMES, MiddlewareSet

logger = logging.getLogger("wren.discovery")

_MODULE_PREFIX = "_wren_route"
_UNSAFE_CHARS_RE = re.compile(r"\W")
_counter = itertools.count()

# camelCase hook exports are accepted as well
_HOOK_EXPORTS = {
    "on_request": ("on_request", "onRequest"),
    "on_before_response": ("on_before_response", "onBeforeResponse"),
    "on_error": ("on_error", "onError"),
}


def _module_name(path: Path) -> str:
    stem = _UNSAFE_CHARS_RE.sub("_", path.stem)
    return f"{_MODULE_PREFIX}_{stem}_{next(_counter)}"


def import_route_file(path: str | Path) -> ModuleType:
    """Import *path* as a fresh module.

    Raises ``LoadError`` if the file cannot be found or raises on import.
    """
    file_path = Path(path)
    name = _module_name(file_path)
    spec = importlib.util.spec_from_file_location(name, file_path)
    if spec is None or spec.loader is None:
        raise LoadError(str(file_path), "not an importable Python file")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(name, None)
        raise LoadError(str(file_path), f"{type(exc).__name__}: {exc}") from exc
    return module


def _callable_export(module: Any, name: str, path: Path) -> Any:
    value = getattr(module, name, None)
    if value is not None and not callable(value):
        raise LoadError(str(path), f"export {name!r} must be callable, got {type(value).__name__}")
    return value


def exports_from_module(module: Any, path: str | Path) -> ModuleExports:
    """Validate a loaded module's names (or any object with those attributes) into ``ModuleExports``."""
    source = Path(path)
    handlers = {}
    for method in HttpMethod:
        value = _callable_export(module, method.lower(), source)
        if value is None:
            value = _callable_export(module, method.value, source)
        if value is not None:
            handlers[method] = value

    hooks: dict[str, Any] = {}
    for hook_name in HOOK_NAMES:
        for attr in _HOOK_EXPORTS[hook_name]:
            value = getattr(module, attr, None)
            if value is not None:
                hooks[hook_name] = value
                break
    try:
        middleware = MiddlewareSet.build(**hooks)
    except TypeError as exc:
        raise LoadError(str(source), str(exc)) from exc

    return ModuleExports(
        source=source,
        handlers=handlers,
        default=_callable_export(module, "default", source),
        handler=_callable_export(module, "handler", source),
        middleware=middleware,
    )


def load_exports(path: str | Path) -> ModuleExports:
    """Import a route file and return its validated exports.

    Raises ``LoadError`` on import failure or malformed exports.
    """
    module = import_route_file(path)
    exports = exports_from_module(module, path)
    logger.debug(
        "Loaded %s: verbs=%s default=%s hooks=%s",
        path,
        ",".join(exports.handlers) or "-",
        exports.default is not None,
        bool(exports.middleware),
    )
    return exports
