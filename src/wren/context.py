"""Per-request context handed to route handlers and hooks.

A ``RequestContext`` is created fresh for every request by the pipeline
(or the module proxy) and is never shared or reused. Hooks may mutate it
by convention: ``on_request`` validators replace ``body``/``query``/
``params`` with cleaned values, auth hooks stash the caller in
``state``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wren.http.params import Headers
from wren.http.request import Request
from wren.server.sender import ResponseWriter


@dataclass(slots=True)
class RequestContext:
    """Everything a handler needs about one in-flight request.

    Attributes:
        request: The transport-level request.
        response: The transport-level response writer. Handlers that write
            through it directly (streaming) should return ``None``.
        method: Upper-case HTTP method.
        path: Request path.
        query: Query parameters (first value per key).
        params: Route parameters (``:name`` segments, ``*`` for a wildcard).
        body: Decoded request body (JSON, form dict, text, or ``None``).
        state: Free-form per-request storage for hooks.
        module_name: Target module (module proxy requests only).
        remaining_path: Path after the module segment (module proxy only).
        base_path: Mount path of the module proxy (module proxy only).
    """

    request: Request
    response: ResponseWriter
    method: str
    path: str
    query: dict[str, str]
    params: dict[str, str]
    body: Any = None
    state: dict[str, Any] = field(default_factory=dict)
    module_name: str | None = None
    remaining_path: str | None = None
    base_path: str | None = None

    @classmethod
    def from_request(
        cls,
        request: Request,
        response: ResponseWriter,
        **extra: Any,
    ) -> RequestContext:
        """Build a fresh context; the body is loaded separately with ``load_body``."""
        return cls(
            request=request,
            response=response,
            method=request.method,
            path=request.path,
            query=request.query.to_dict(),
            params=dict(request.path_params),
            **extra,
        )

    async def load_body(self) -> Any:
        """Read and decode the request body into ``self.body``."""
        self.body = await self.request.parsed_body()
        return self.body

    @property
    def headers(self) -> Headers:
        return self.request.headers

    @property
    def client_address(self) -> str:
        return self.request.client_address
