"""File-name conventions -- pure functions from names to URL patterns.

::

    index.py              -> <base>            (all exported verbs)
    health.get.py         -> <base>/health     GET
    [id].get.py           -> <base>/:id        GET
    [...path].py          -> <base>/*          (all exported verbs)
    users.info.py         -> <base>/users      (first dot segment)
    [module].py           -> module proxy at <base>/:module/*

Directories follow the same bracket rules: ``[id]`` becomes ``:id``,
``[...rest]`` becomes ``*`` and ``index`` collapses into its parent.
"""

import re

from wren.discovery.types import HttpMethod, ParsedRoute

HTTP_METHODS: tuple[HttpMethod, ...] = tuple(HttpMethod)

_PARAM_SEGMENT_RE = re.compile(r"^\[(\.\.\.)?([^\]]+)\]$")
_METHOD_SUFFIX_RE = re.compile(
    r"\.(" + "|".join(m.lower() for m in HTTP_METHODS) + r")$", re.IGNORECASE
)
_REPEATED_SLASH_RE = re.compile(r"/+")

MODULE_PROXY_NAME = "[module]"


def clean_path(pattern: str) -> str:
    """Collapse repeated ``/``, drop a trailing ``/``; empty becomes ``/``."""
    collapsed = _REPEATED_SLASH_RE.sub("/", pattern).rstrip("/")
    return collapsed or "/"


def split_method(name: str) -> tuple[str, tuple[HttpMethod, ...]]:
    """Split a trailing ``.verb`` off *name*.

    ``"[id].get"`` -> ``("[id]", (GET,))``; ``"users.info"`` -> ``("users.info", ())``.
    """
    match = _METHOD_SUFFIX_RE.search(name)
    if match is None:
        return name, ()
    return name[: match.start()], (HttpMethod(match.group(1).upper()),)


def _resource_name(name: str) -> str:
    # The resource is the first dot segment; a bracketed name is taken whole
    # so the dots of [...path] stay inside it.
    if name.startswith("["):
        end = name.find("]")
        if end != -1:
            return name[: end + 1]
    return name.split(".", 1)[0]


def segment_for(name: str) -> str:
    """URL segment for a bracketed or literal name: ``[id]`` -> ``:id``, ``[...x]`` -> ``*``."""
    match = _PARAM_SEGMENT_RE.match(name)
    if match is None:
        return name
    if match.group(1):
        return "*"
    return f":{match.group(2)}"


def directory_segment(name: str) -> str:
    """URL segment contributed by a directory; ``index`` contributes nothing."""
    if name == "index":
        return ""
    return segment_for(name)


def join_path(base_path: str, segment: str) -> str:
    if not segment:
        return base_path
    return f"{base_path}/{segment}"


def is_module_proxy(name: str) -> bool:
    """True when the resource name is exactly ``[module]`` (a verb suffix is allowed)."""
    resource, _ = split_method(name)
    return resource == MODULE_PROXY_NAME


def parse_route(name: str, base_path: str = "") -> ParsedRoute:
    """Derive the URL pattern and verbs from a file name without its extension.

    The returned pattern is not cleaned; the registrar cleans it before
    registration.
    """
    remainder, methods = split_method(name)
    if remainder == MODULE_PROXY_NAME:
        return ParsedRoute(base_path or "/", methods, is_module_proxy=True)

    resource = _resource_name(remainder)
    if resource == "index":
        return ParsedRoute(base_path or "/", methods)
    return ParsedRoute(join_path(base_path, segment_for(resource)), methods)
