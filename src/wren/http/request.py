"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncIterator
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qsl

from wren._internal.asgi import Receive, Scope
from wren.errors import ClientError
from wren.http.params import Headers, QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.json()``,
    ``.form()`` or ``.parsed_body()``.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    http_version: str
    client: tuple[str, int] | None
    max_body_size: int | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for the body and its parsed forms
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def client_address(self) -> str:
        """Best-effort client address: first ``x-forwarded-for`` hop, else the peer."""
        forwarded = self.headers.get("x-forwarded-for")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first
        if self.client:
            return self.client[0]
        return "unknown"

    @property
    def url(self) -> str:
        """Request path plus query string."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs.decode('latin-1')}"
        return self.path

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying the router's path parameters.

        The body cache is shared so a body read before routing is not lost.
        """
        return replace(self, path_params=path_params, _cache=self._cache)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached -- the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks: list[bytes] = []
        size = 0
        async for chunk in self.stream():
            size += len(chunk)
            if self.max_body_size is not None and size > self.max_body_size:
                raise ClientError(413, "Request body too large")
            chunks.append(chunk)
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncIterator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            if message.get("type") == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON. Malformed JSON is a 400."""
        raw = await self.body()
        try:
            return json_module.loads(raw)
        except ValueError as exc:
            raise ClientError(400, "Invalid JSON body") from exc

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def form(self) -> dict[str, str]:
        """Parse an ``application/x-www-form-urlencoded`` body."""
        raw = await self.body()
        return dict(parse_qsl(raw.decode("latin-1"), keep_blank_values=True))

    async def parsed_body(self) -> Any:
        """Decode the body according to its content type.

        JSON bodies are parsed, url-encoded forms become a dict, other
        non-empty bodies are returned as text. An empty body is ``None``.
        Cached like ``body()``.
        """
        if "_parsed" in self._cache:
            return self._cache["_parsed"]
        raw = await self.body()
        if not raw:
            result: Any = None
        else:
            ct = (self.content_type or "").lower()
            if "json" in ct:
                result = await self.json()
            elif "application/x-www-form-urlencoded" in ct:
                result = await self.form()
            else:
                result = raw.decode("utf-8", errors="replace")
        self._cache["_parsed"] = result
        return result

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
        *,
        max_body_size: int | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers.from_asgi(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            max_body_size=max_body_size,
            _receive=receive,
        )
