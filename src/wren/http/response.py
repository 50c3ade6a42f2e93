"""HTTP response value with chainable .with_*() transformation API.

Handlers usually return plain JSON-able data; return a ``Response`` to
control the body bytes, status, content type, or headers exactly. The
test client also hands back ``Response`` objects.
"""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass, replace
from typing import Any

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def dump_json(data: Any) -> bytes:
    """Serialize *data* the way every JSON response body is serialized."""
    return json_module.dumps(data, default=str, ensure_ascii=False).encode("utf-8")


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: str | bytes = b""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def json_response(cls, data: Any, status: int = 200) -> Response:
        """Build a JSON response from *data*."""
        return cls(body=dump_json(data), status=status, content_type=JSON_CONTENT_TYPE)

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body_bytes)

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first header value for *name* (case-insensitive)."""
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return default
