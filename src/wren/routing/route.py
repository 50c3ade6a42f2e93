"""Route, PathSegment, and RouteMatch frozen dataclasses."""

from dataclasses import dataclass
from enum import Enum

from wren._internal.types import Endpoint

# Pseudo-method: a route registered under it answers every verb
MATCH_ALL = "ALL"


class SegmentKind(Enum):
    STATIC = "static"
    PARAM = "param"
    WILDCARD = "wildcard"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:   ``/users``  (kind=STATIC)
    Param:    ``/:id``    (kind=PARAM, name="id")
    Wildcard: ``/*``      (kind=WILDCARD, name="*"), last segment only
    """

    value: str
    kind: SegmentKind = SegmentKind.STATIC
    name: str | None = None

    @property
    def is_param(self) -> bool:
        return self.kind is SegmentKind.PARAM

    @property
    def is_wildcard(self) -> bool:
        return self.kind is SegmentKind.WILDCARD


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``source`` names where the route came from (a route file path for
    discovered routes), for logs and ``wren routes``.
    """

    path: str
    endpoint: Endpoint
    methods: frozenset[str]
    source: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
