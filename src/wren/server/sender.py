"""ASGI response sending -- the transport-level response handle.

``ResponseWriter`` is what the router hands to every endpoint next to
the ``Request``. It writes ASGI messages directly, so a handler can
stream a body itself, and it records whether the response has started
so nothing is ever sent twice.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from wren._internal.asgi import Send
from wren.http.response import JSON_CONTENT_TYPE, Response, dump_json


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode_headers(headers: Mapping[str, str] | tuple[tuple[str, str], ...]) -> list[tuple[bytes, bytes]]:
    items = headers.items() if isinstance(headers, Mapping) else headers
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in items]


class ResponseWriter:
    """Writes one HTTP response through ASGI ``send``.

    Single-shot helpers (``json``, ``send``, ``send_response``) start and
    finish the response in one call. ``start``/``write``/``end`` stream a
    body in chunks. ``status_code`` and ``set_header`` may be changed
    until the response starts.
    """

    __slots__ = ("_finished", "_headers", "_head_only", "_send", "_started", "status_code")

    def __init__(self, send: Send, *, head_only: bool = False) -> None:
        self._send = send
        self._head_only = head_only
        self._started = False
        self._finished = False
        self._headers: list[tuple[str, str]] = []
        self.status_code = 200

    @property
    def headers_sent(self) -> bool:
        """True once the status line and headers have gone out."""
        return self._started

    @property
    def finished(self) -> bool:
        return self._finished

    def status(self, code: int) -> ResponseWriter:
        """Set the status code for the response; chainable."""
        self.status_code = code
        return self

    def set_header(self, name: str, value: str) -> ResponseWriter:
        """Add a response header; chainable."""
        if self._started:
            msg = f"Cannot set header {name!r}: response already started"
            raise RuntimeError(msg)
        self._headers.append((name, value))
        return self

    # -- Streaming API --

    async def start(
        self,
        status: int | None = None,
        *,
        content_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Send the status line and headers without finishing the body."""
        if self._started:
            msg = "Response already started"
            raise RuntimeError(msg)
        if status is not None:
            self.status_code = status
        raw = []
        if content_type is not None:
            raw.append((b"content-type", content_type.encode("latin-1")))
        raw.extend(_encode_headers(tuple(self._headers)))
        if headers:
            raw.extend(_encode_headers(headers))
        self._started = True
        await self._send({"type": "http.response.start", "status": self.status_code, "headers": raw})

    async def write(self, chunk: str | bytes) -> None:
        """Send one body chunk; starts the response if needed."""
        if self._finished:
            msg = "Response already finished"
            raise RuntimeError(msg)
        if not self._started:
            await self.start()
        data = chunk.encode("utf-8") if isinstance(chunk, str) else chunk
        if data and not self._head_only:
            await self._send({"type": "http.response.body", "body": data, "more_body": True})

    async def end(self) -> None:
        """Finish the body; starts an empty response if nothing was sent."""
        if self._finished:
            return
        if not self._started:
            await self._send_complete(b"", None)
            return
        self._finished = True
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})

    # -- Single-shot API --

    async def send(
        self,
        body: str | bytes = b"",
        *,
        status: int | None = None,
        content_type: str = "text/plain; charset=utf-8",
    ) -> None:
        """Send a complete response body."""
        if status is not None:
            self.status_code = status
        data = body.encode("utf-8") if isinstance(body, str) else body
        await self._send_complete(data, content_type)

    async def json(self, data: Any, *, status: int | None = None) -> None:
        """Serialize *data* as JSON and send it as the complete response."""
        if status is not None:
            self.status_code = status
        await self._send_complete(dump_json(data), JSON_CONTENT_TYPE)

    async def send_response(self, response: Response) -> None:
        """Send a prepared ``Response`` value."""
        for name, value in response.headers:
            self.set_header(name, value)
        self.status_code = response.status
        await self._send_complete(response.body_bytes, response.content_type)

    async def _send_complete(self, body: bytes, content_type: str | None) -> None:
        if self._started:
            msg = "Response already started"
            raise RuntimeError(msg)
        if not _body_allowed(self.status_code):
            body = b""
        raw: list[tuple[bytes, bytes]] = []
        if content_type is not None and body:
            raw.append((b"content-type", content_type.encode("latin-1")))
        raw.extend(_encode_headers(tuple(self._headers)))
        raw.append((b"content-length", str(len(body)).encode("latin-1")))
        self._started = True
        self._finished = True
        await self._send({"type": "http.response.start", "status": self.status_code, "headers": raw})
        await self._send(
            {"type": "http.response.body", "body": b"" if self._head_only else body}
        )
