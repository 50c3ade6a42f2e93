"""Route manifest -- the explicit list of what discovery found.

A ``RouteManifest`` pairs every candidate with its parsed route and its
loaded exports (or the ``LoadError`` that prevented loading). It is
built once at startup, either from a scan::

    manifest = RouteManifest.build(discover("routes", "modules"))

or by hand, with no file system involved::

    manifest = RouteManifest.from_mapping({
        "health.get": {"default": health},
        "items/[id]": {"get": show_item, "on_request": require_auth},
    })

The registrar consumes manifests; nothing here touches the app.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from types import SimpleNamespace
from typing import Any

from wren.discovery.conventions import directory_segment, join_path, parse_route
from wren.discovery.loader import exports_from_module, load_exports
from wren.discovery.types import GLOBAL_PREFIX, ModuleExports, ParsedRoute, RouteCandidate
from wren.errors import LoadError

logger = logging.getLogger("wren.discovery")


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    """One candidate with its parsed route and load outcome."""

    candidate: RouteCandidate
    parsed: ParsedRoute
    exports: ModuleExports | None = None
    error: LoadError | None = None

    @property
    def ok(self) -> bool:
        return self.exports is not None


def parse_candidate(candidate: RouteCandidate) -> ParsedRoute:
    return parse_route(candidate.stem, candidate.base_path)


def load_entry(
    candidate: RouteCandidate,
    loader: Callable[[Path], ModuleExports] = load_exports,
) -> ManifestEntry:
    """Parse and load one candidate; a ``LoadError`` is recorded, not raised."""
    parsed = parse_candidate(candidate)
    try:
        exports = loader(candidate.full_path)
    except LoadError as exc:
        logger.error("Error loading route %s: %s", candidate.full_path, exc.reason)
        return ManifestEntry(candidate, parsed, error=exc)
    return ManifestEntry(candidate, parsed, exports)


@dataclass(frozen=True, slots=True)
class RouteManifest:
    """Ordered, immutable collection of manifest entries."""

    entries: tuple[ManifestEntry, ...] = ()

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def loaded(self) -> tuple[ManifestEntry, ...]:
        return tuple(e for e in self.entries if e.ok)

    @property
    def failed(self) -> tuple[ManifestEntry, ...]:
        return tuple(e for e in self.entries if not e.ok)

    @classmethod
    def build(
        cls,
        candidates: Iterable[RouteCandidate],
        *,
        loader: Callable[[Path], ModuleExports] = load_exports,
    ) -> RouteManifest:
        """Load every candidate, in scan order."""
        return cls(tuple(load_entry(c, loader) for c in candidates))

    @classmethod
    def from_mapping(
        cls,
        routes: Mapping[str, Mapping[str, Any]],
        *,
        base_path: str = "",
        module_prefix: str = GLOBAL_PREFIX,
    ) -> RouteManifest:
        """Build a manifest from ``{"dir/file-stem": {export: value}}``.

        Keys follow the file naming conventions without the extension;
        values hold the same names a route file would export. Malformed
        exports raise ``LoadError`` immediately.
        """
        entries = []
        for key, exports in routes.items():
            parts = PurePosixPath(key.strip("/")).parts
            if not parts:
                msg = "route key must name a file"
                raise LoadError(key, msg)
            route_base = base_path
            for directory in parts[:-1]:
                route_base = join_path(route_base, directory_segment(directory))
            candidate = RouteCandidate(
                full_path=Path(f"{key}.py"),
                base_path=route_base,
                file_name=f"{parts[-1]}.py",
                module_prefix=module_prefix,
            )
            loaded = exports_from_module(SimpleNamespace(**exports), candidate.full_path)
            entries.append(ManifestEntry(candidate, parse_candidate(candidate), loaded))
        return cls(tuple(entries))
