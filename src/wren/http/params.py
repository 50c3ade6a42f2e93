"""Read-only multi-value mappings for request headers and query strings.

Both keep every value seen for a key, in arrival order. Indexing returns
the first one; ``get_list`` returns them all.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from urllib.parse import parse_qsl


class MultiValueMapping(Mapping[str, str]):
    """A ``str -> str`` view over ``str -> list[str]``."""

    __slots__ = ("_values",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        values: dict[str, list[str]] = {}
        for key, value in pairs:
            values.setdefault(self._normalize(key), []).append(value)
        self._values = values

    @staticmethod
    def _normalize(key: str) -> str:
        return key

    def __getitem__(self, key: str) -> str:
        return self._values[self._normalize(key)][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._normalize(key) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value for *key*."""
        return list(self._values.get(self._normalize(key), ()))

    def to_dict(self) -> dict[str, str]:
        """First value per key, as a plain mutable dict."""
        return {key: values[0] for key, values in self._values.items()}


class Headers(MultiValueMapping):
    """Request headers. Names match case-insensitively and iterate lowercased."""

    __slots__ = ()

    @classmethod
    def from_asgi(cls, raw: Iterable[tuple[bytes, bytes]]) -> Headers:
        """Decode the ``headers`` byte pairs of an ASGI scope."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)

    @staticmethod
    def _normalize(key: str) -> str:
        return key.lower()


class QueryParams(MultiValueMapping):
    """Parsed query string with blank values kept; ``raw`` is the undecoded bytes."""

    __slots__ = ("raw",)

    def __init__(self, query_string: bytes = b"") -> None:
        super().__init__(parse_qsl(query_string.decode("latin-1"), keep_blank_values=True))
        self.raw = query_string
