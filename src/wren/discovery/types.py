"""Discovery data model -- frozen records produced at startup."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from wren._internal.types import Endpoint, Handler
from wren.middleware.protocol import MiddlewareSet

GLOBAL_PREFIX = "global"


class HttpMethod(StrEnum):
    """The closed set of verbs a route file can be bound to."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"


@dataclass(frozen=True, slots=True)
class RouteCandidate:
    """A route file found by the scanner.

    Attributes:
        full_path: Absolute path of the file.
        base_path: URL path of the directory that contains it.
        file_name: File name including the extension.
        module_prefix: ``"global"`` for the global tree, else the module name.
    """

    full_path: Path
    base_path: str
    file_name: str
    module_prefix: str = GLOBAL_PREFIX

    @property
    def stem(self) -> str:
        """File name without its final extension (``[id].get`` for ``[id].get.py``)."""
        return self.file_name.rsplit(".", 1)[0] if "." in self.file_name else self.file_name


@dataclass(frozen=True, slots=True)
class ParsedRoute:
    """What the file name says about a route.

    An empty ``http_methods`` means the verbs come from the module's exports.
    """

    url_pattern: str
    http_methods: tuple[HttpMethod, ...] = ()
    is_module_proxy: bool = False


@dataclass(frozen=True, slots=True)
class ModuleExports:
    """The validated public surface of one loaded route file."""

    source: Path
    handlers: Mapping[HttpMethod, Handler] = field(default_factory=dict)
    default: Handler | None = None
    handler: Handler | None = None
    middleware: MiddlewareSet = field(default_factory=MiddlewareSet)

    def for_method(self, method: HttpMethod) -> Handler | None:
        """The verb export, falling back to ``default``."""
        return self.handlers.get(method) or self.default

    @property
    def proxy_handler(self) -> Handler | None:
        return self.default or self.handler


@dataclass(frozen=True, slots=True)
class RegisteredRoute:
    """One successful ``add_route`` call."""

    http_method: str
    url_pattern: str
    endpoint: Endpoint
    source: str
    module_prefix: str = GLOBAL_PREFIX


@dataclass(frozen=True, slots=True)
class ModuleProxyBinding:
    """A ``[module]`` file mounted over the modules root."""

    mount_path: str
    modules_root: Path
    handler: Callable[..., Any]
    http_methods: tuple[HttpMethod, ...] = ()

    @property
    def pattern(self) -> str:
        base = "" if self.mount_path == "/" else self.mount_path
        return f"{base}/:module/*"
