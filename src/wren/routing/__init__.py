"""Routing -- compiled route table with O(path-depth) matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes.
"""

from wren.routing.route import MATCH_ALL, PathSegment, Route, RouteMatch
from wren.routing.router import Router, parse_path

__all__ = ["MATCH_ALL", "PathSegment", "Route", "RouteMatch", "Router", "parse_path"]
