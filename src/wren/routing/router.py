"""Compiled router with trie-based path matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes.

Patterns use ``:name`` for a single-segment parameter and a terminal
``*`` for a wildcard that consumes the rest of the path (zero or more
segments). Matching prefers static segments, then parameters, then the
wildcard, and backtracks when a branch has no route for the request
method. A route registered under ``ALL`` answers every method, and HEAD
falls back to the GET route.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from wren.errors import MethodNotAllowed, NotFound, RegistrationError
from wren.routing.route import MATCH_ALL, PathSegment, Route, RouteMatch, SegmentKind

WILDCARD_PARAM = "*"


def parse_path(path: str, method: str = MATCH_ALL) -> list[PathSegment]:
    """Parse a route pattern string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/:id"      -> [PathSegment("users"), PathSegment(":id", PARAM, "id")]
        "/files/*"        -> [PathSegment("files"), PathSegment("*", WILDCARD, "*")]

    Raises ``RegistrationError`` for a wildcard that is not the last
    segment or a parameter without a name.
    """
    if not path.startswith("/"):
        raise RegistrationError(method, path, "pattern must start with '/'")

    parts = [p for p in path.strip("/").split("/") if p]
    segments: list[PathSegment] = []
    for index, part in enumerate(parts):
        if part == "*":
            if index != len(parts) - 1:
                raise RegistrationError(
                    method, path, "wildcard '*' must be the final path segment"
                )
            segments.append(PathSegment(part, SegmentKind.WILDCARD, WILDCARD_PARAM))
        elif part.startswith(":"):
            name = part[1:]
            if not name:
                raise RegistrationError(method, path, "parameter segment ':' has no name")
            segments.append(PathSegment(part, SegmentKind.PARAM, name))
        else:
            segments.append(PathSegment(part))
    return segments


@dataclass(slots=True)
class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    # Static segment children: "users" -> node
    children: dict[str, _TrieNode] = field(default_factory=dict)
    # Parameter children in registration order: "id" -> node
    params: dict[str, _TrieNode] = field(default_factory=dict)
    # Wildcard routes, keyed by HTTP method
    wildcard: dict[str, Route] = field(default_factory=dict)
    # Routes at this node, keyed by HTTP method
    routes_by_method: dict[str, Route] = field(default_factory=dict)


def _accepts(routes: dict[str, Route], method: str) -> Route | None:
    route = routes.get(method)
    if route is None and method == "HEAD":
        route = routes.get("GET")
    if route is None:
        route = routes.get(MATCH_ALL)
    return route


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/users", endpoint, frozenset({"GET"})))
        router.add(Route("/users/:id", endpoint, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False
        self._routes: list[Route] = []

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile().

        Raises ``RegistrationError`` if the pattern is malformed or any of
        the route's methods is already registered for the same pattern.
        Nothing is added when it raises.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        method_label = ",".join(sorted(route.methods)) or MATCH_ALL
        segments = parse_path(route.path, method_label)

        node = self._root
        terminal: dict[str, Route] | None = None
        for seg in segments:
            if seg.kind is SegmentKind.WILDCARD:
                terminal = node.wildcard
                break
            if seg.kind is SegmentKind.PARAM:
                assert seg.name is not None
                node = node.params.setdefault(seg.name, _TrieNode())
            else:
                node = node.children.setdefault(seg.value, _TrieNode())
        if terminal is None:
            terminal = node.routes_by_method

        taken = sorted(m for m in route.methods if m in terminal)
        if taken:
            raise RegistrationError(
                ",".join(taken), route.path, "route already registered for this method"
            )
        for method in route.methods:
            terminal[method] = route
        self._routes.append(route)

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        allowed: set[str] = set()
        result = self._match_node(self._root, parts, 0, {}, method, allowed)
        if result is not None:
            return result
        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"No route matches {method} {path!r}")

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
        method: str,
        allowed: set[str],
    ) -> RouteMatch | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            route = _accepts(node.routes_by_method, method)
            if route is not None:
                return RouteMatch(route=route, path_params=params)
            allowed.update(node.routes_by_method)
            # A wildcard also matches an empty remainder
            return self._match_wildcard(node, "", params, method, allowed)

        part = parts[index]

        # 1. Static child (exact match)
        child = node.children.get(part)
        if child is not None:
            result = self._match_node(child, parts, index + 1, params, method, allowed)
            if result is not None:
                return result

        # 2. Parameter children, in registration order
        for name, param_node in node.params.items():
            result = self._match_node(
                param_node, parts, index + 1, {**params, name: part}, method, allowed
            )
            if result is not None:
                return result

        # 3. Wildcard consumes the remainder
        return self._match_wildcard(node, "/".join(parts[index:]), params, method, allowed)

    @staticmethod
    def _match_wildcard(
        node: _TrieNode,
        remainder: str,
        params: dict[str, str],
        method: str,
        allowed: set[str],
    ) -> RouteMatch | None:
        if not node.wildcard:
            return None
        route = _accepts(node.wildcard, method)
        if route is None:
            allowed.update(node.wildcard)
            return None
        return RouteMatch(route=route, path_params={**params, WILDCARD_PARAM: remainder})
