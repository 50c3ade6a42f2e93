"""Module proxy -- one route that forwards to any module by name.

A ``[module].py`` file mounted at ``/gateway`` answers
``/gateway/<module>/<anything>``. Per request the proxy:

1. takes the first segment after the mount path as the module name
   (missing: 400);
2. checks that ``<modules_root>/<module>`` is a directory (missing: 404
   listing the modules that do exist, read from disk on every call);
3. calls the file's handler with a ``RequestContext`` carrying
   ``module_name``, ``remaining_path`` and ``base_path``;
4. sends a returned value as JSON, or an error as
   ``{"success": false, "message": ..., "details": ...}``.

Directory checks go through ``anyio.Path`` so they never block the loop.
"""

import logging
import time
from typing import Any

import anyio

from wren._internal.invoke import invoke
from wren.context import RequestContext
from wren.discovery.types import ModuleProxyBinding
from wren.errors import ProxyResolutionError
from wren.http.request import Request
from wren.server.errors import error_status
from wren.server.handler import send_result
from wren.server.sender import ResponseWriter
from wren.server.terminal_errors import log_error

logger = logging.getLogger("wren.discovery")


def _visible(name: str) -> bool:
    return bool(name) and not name.startswith(("_", ".")) and "\\" not in name


def split_module_path(path: str, mount_path: str) -> tuple[str | None, str]:
    """Split a request path into ``(module_name, remaining_path)`` under *mount_path*.

    ``split_module_path("/gw/users/1/posts", "/gw")`` -> ``("users", "/1/posts")``.
    """
    base = "" if mount_path == "/" else mount_path.rstrip("/")
    rest = path[len(base) :] if base and path.startswith(base) else path
    parts = [p for p in rest.split("/") if p]
    if not parts:
        return None, "/"
    return parts[0], "/" + "/".join(parts[1:])


def _failure_payload(exc: BaseException) -> dict[str, Any]:
    if isinstance(exc, ProxyResolutionError):
        return exc.to_payload()
    message = getattr(exc, "message", None) or str(exc) or "Internal Server Error"
    payload: dict[str, Any] = {"success": False, "message": message}
    details = getattr(exc, "details", None)
    if details:
        payload["details"] = details
    return payload


class ModuleProxy:
    """Substrate endpoint for a ``ModuleProxyBinding``."""

    __slots__ = ("binding",)

    def __init__(self, binding: ModuleProxyBinding) -> None:
        self.binding = binding

    def __repr__(self) -> str:
        return f"ModuleProxy({self.binding.pattern!r} -> {self.binding.modules_root})"

    @property
    def __name__(self) -> str:
        return getattr(self.binding.handler, "__name__", "module_proxy")

    async def available_modules(self) -> list[str]:
        """Module directory names under the modules root, sorted."""
        root = anyio.Path(self.binding.modules_root)
        if not await root.is_dir():
            return []
        names = [p.name async for p in root.iterdir() if _visible(p.name) and await p.is_dir()]
        return sorted(names)

    async def module_exists(self, name: str) -> bool:
        if not _visible(name):
            return False
        return await (anyio.Path(self.binding.modules_root) / name).is_dir()

    async def resolve(self, request: Request) -> tuple[str, str]:
        """Return ``(module_name, remaining_path)`` or raise ``ProxyResolutionError``."""
        name, remaining = split_module_path(request.path, self.binding.mount_path)
        if name is None:
            raise ProxyResolutionError(400, "Module name is required")
        if not await self.module_exists(name):
            raise ProxyResolutionError(
                404,
                f"Module '{name}' not found",
                available_modules=tuple(await self.available_modules()),
            )
        return name, remaining

    async def __call__(self, request: Request, response: ResponseWriter) -> None:
        start = time.perf_counter()
        try:
            name, remaining = await self.resolve(request)
            context = RequestContext.from_request(
                request,
                response,
                module_name=name,
                remaining_path=remaining,
                base_path=self.binding.mount_path,
            )
            context.params = {"module": name, **context.params}
            await context.load_body()
            result = await invoke(self.binding.handler, context)
        except Exception as exc:
            status = error_status(exc)
            if status >= 500:
                log_error(exc, request, prefix=f"{request.method} {request.path} - proxy ERROR: {exc}")
            else:
                logger.info("%s %s - proxy %d: %s", request.method, request.path, status, exc)
            if not response.headers_sent:
                await response.json(_failure_payload(exc), status=status)
            return

        if result is not None and not response.headers_sent:
            await send_result(response, result)
        logger.debug(
            "%s %s - %dms - %d (module %s)",
            request.method,
            request.path,
            int((time.perf_counter() - start) * 1000),
            response.status_code,
            name,
        )
