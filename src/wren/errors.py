"""Wren exception hierarchy.

Shared across the router, discovery, pipeline, and middleware so every
module raises and catches the same types.

Startup errors (``LoadError``, ``RegistrationError``) are contained to the
route file that caused them. ``HTTPError`` and its subclasses carry the
status code, message, and optional details that end up in the JSON error
body sent to the client.
"""

from typing import Any


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app configuration is invalid."""


class LoadError(WrenError):
    """A route file could not be imported or exports an invalid shape.

    Raised by the module loader. The registrar logs it and skips the
    candidate; it never aborts a scan.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class RegistrationError(WrenError):
    """The router rejected a method/pattern pair.

    Raised by ``Router.add`` for malformed patterns (a wildcard that is
    not the last segment, an empty parameter name) and for duplicate
    method + pattern registrations.
    """

    def __init__(self, method: str, pattern: str, reason: str) -> None:
        super().__init__(f"{method} {pattern}: {reason}")
        self.method = method
        self.pattern = pattern
        self.reason = reason


class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or handlers. The pipeline reads
    ``status``, ``message`` and ``details`` to build the JSON error body.
    """

    def __init__(
        self,
        status: int = 500,
        message: str = "",
        *,
        details: Any = None,
        headers: tuple[tuple[str, str], ...] = (),
    ) -> None:
        super().__init__(message or str(status))
        self.status = status
        self.message = message
        self.details = details
        self.headers = headers

    def __str__(self) -> str:
        if self.message:
            return f"{self.status}: {self.message}"
        return str(self.status)


class ClientError(HTTPError):
    """4xx -- the request itself was wrong."""

    def __init__(
        self,
        status: int = 400,
        message: str = "Bad Request",
        *,
        details: Any = None,
        headers: tuple[tuple[str, str], ...] = (),
    ) -> None:
        if not 400 <= status < 500:
            msg = f"ClientError status must be 4xx, got {status}"
            raise ValueError(msg)
        super().__init__(status, message, details=details, headers=headers)


class ServerError(HTTPError):
    """5xx -- the server failed to produce a response."""

    def __init__(
        self,
        status: int = 500,
        message: str = "Internal Server Error",
        *,
        details: Any = None,
    ) -> None:
        if status < 500:
            msg = f"ServerError status must be 5xx, got {status}"
            raise ValueError(msg)
        super().__init__(status, message, details=details)


class NotFound(ClientError):  # noqa: N818 -- conventional name in web frameworks
    """404 -- no route matched the request path."""

    def __init__(self, message: str = "Not Found") -> None:
        super().__init__(404, message)


class MethodNotAllowed(ClientError):  # noqa: N818 -- conventional name in web frameworks
    """405 -- route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], message: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        self.allowed = allowed
        super().__init__(
            405,
            message or f"Method not allowed. Allowed methods: {allow_value}",
            headers=(("Allow", allow_value),),
        )


class ProxyResolutionError(ClientError):
    """The module proxy could not resolve a target module.

    400 when the module segment is missing, 404 when no module directory
    of that name exists (``available_modules`` lists the ones that do).
    """

    def __init__(
        self,
        status: int,
        message: str,
        *,
        available_modules: tuple[str, ...] | None = None,
    ) -> None:
        super().__init__(status, message)
        self.available_modules = available_modules

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "message": self.message}
        if self.available_modules is not None:
            payload["availableModules"] = list(self.available_modules)
        return payload
