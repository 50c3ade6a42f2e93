"""File-system route discovery.

Scan route directories, parse file names into URL patterns and verbs,
load each file's exports, and register them with an app::

    from wren.discovery import Registrar, discover

    registrar = Registrar(app, modules_root="modules")
    registrar.register_all(discover("routes", "modules"))

``App.mount_routes()`` does exactly this with the app's configuration.
"""

from wren.discovery.conventions import (
    HTTP_METHODS,
    clean_path,
    directory_segment,
    is_module_proxy,
    parse_route,
    split_method,
)
from wren.discovery.loader import exports_from_module, load_exports
from wren.discovery.manifest import ManifestEntry, RouteManifest
from wren.discovery.proxy import ModuleProxy, split_module_path
from wren.discovery.registrar import Registrar, context_adapter
from wren.discovery.scanner import discover, list_modules, scan_module_trees, scan_tree
from wren.discovery.types import (
    HttpMethod,
    ModuleExports,
    ModuleProxyBinding,
    ParsedRoute,
    RegisteredRoute,
    RouteCandidate,
)

__all__ = [
    "HTTP_METHODS",
    "HttpMethod",
    "ManifestEntry",
    "ModuleExports",
    "ModuleProxy",
    "ModuleProxyBinding",
    "ParsedRoute",
    "RegisteredRoute",
    "Registrar",
    "RouteCandidate",
    "RouteManifest",
    "clean_path",
    "context_adapter",
    "directory_segment",
    "discover",
    "exports_from_module",
    "is_module_proxy",
    "list_modules",
    "load_exports",
    "parse_route",
    "scan_module_trees",
    "scan_tree",
    "split_method",
    "split_module_path",
]
