"""Async test client for wren applications.

Uses the same Request and Response types as production.
No wrapper translation layer.
"""

from __future__ import annotations

import inspect
import json as json_module
from typing import Any
from urllib.parse import urlencode

from wren.app import App
from wren.http.response import Response


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for wren applications.

    Sends requests through the ASGI interface directly, no HTTP
    involved, and returns the same ``Response`` type used in production.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/health")
            assert response.status == 200
            assert response.json()["status"] == "ok"
    """

    __slots__ = ("app", "client_address")

    def __init__(self, app: App, *, client_address: str = "127.0.0.1") -> None:
        self.app = app
        self.client_address = client_address

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        for hook in self.app._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result
        return self

    async def __aexit__(self, *args: object) -> None:
        for hook in self.app._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def get(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        query: dict[str, str] | None = None,
    ) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers, query=query)

    async def head(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Send a HEAD request."""
        return await self.request("HEAD", path, headers=headers)

    async def options(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Send an OPTIONS request."""
        return await self.request("OPTIONS", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> Response:
        """Send a POST request."""
        return await self.request("POST", path, headers=headers, body=body, json=json)

    async def put(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> Response:
        """Send a PUT request."""
        return await self.request("PUT", path, headers=headers, body=body, json=json)

    async def patch(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> Response:
        """Send a PATCH request."""
        return await self.request("PATCH", path, headers=headers, body=body, json=json)

    async def delete(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Send a DELETE request."""
        return await self.request("DELETE", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
        query: dict[str, str] | None = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app.

        ``json`` is serialized and sent with an ``application/json``
        content type; explicit ``headers`` win.
        """
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""
        if query:
            extra = urlencode(query)
            query_string = f"{query_string}&{extra}" if query_string else extra

        request_body = body or b""
        merged: dict[str, str] = {}
        if json is not None:
            request_body = json_module.dumps(json).encode("utf-8")
            merged["content-type"] = "application/json"
        merged.update(headers or {})

        raw_headers: list[tuple[bytes, bytes]] = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in merged.items()
        ]

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path_part,
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": (self.client_address, 0),
        }

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        response_status = 200
        response_headers: list[tuple[bytes, bytes]] = []
        response_body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        content_type = ""
        extra_headers: list[tuple[str, str]] = []
        for name_b, value_b in response_headers:
            name_str = name_b.decode("latin-1")
            value_str = value_b.decode("latin-1")
            if name_str == "content-type":
                content_type = value_str
            elif name_str != "content-length":
                extra_headers.append((name_str, value_str))

        return Response(
            body=b"".join(response_body_parts),
            status=response_status,
            content_type=content_type,
            headers=tuple(extra_headers),
        )
