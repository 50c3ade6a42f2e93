"""Helpers for building hook sets and consistent JSON payloads."""

from collections.abc import Mapping
from typing import Any

from wren.middleware.protocol import MiddlewareSet


def create_middleware(
    *,
    on_request: Any = None,
    on_before_response: Any = None,
    on_error: Any = None,
) -> MiddlewareSet:
    """Bundle hooks into a reusable ``MiddlewareSet``."""
    return MiddlewareSet.build(
        on_request=on_request,
        on_before_response=on_before_response,
        on_error=on_error,
    )


def combine_middlewares(*sets: MiddlewareSet | Mapping[str, Any] | None) -> MiddlewareSet:
    """Concatenate hook sets in argument order; ``None`` entries are skipped.

    Mappings are accepted with the same keys as route module exports::

        protected = combine_middlewares(
            create_middleware(on_request=require_auth),
            {"on_error": status_error_handler},
        )
    """
    combined = MiddlewareSet()
    for item in sets:
        if item is None:
            continue
        hooks = item if isinstance(item, MiddlewareSet) else MiddlewareSet.from_mapping(item)
        combined = combined.combine(hooks)
    return combined


def success_response(data: Any = None, message: str = "Success") -> dict[str, Any]:
    return {"success": True, "message": message, "data": data}


def error_response(message: str, details: Any = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "message": message}
    if details:
        payload["details"] = details
    return payload
