"""Route hook protocol and the MiddlewareSet container.

A route declares hooks at module level (or passes them to
``define_event_handler``)::

    on_request = [rate_limit_hook, require_auth]      # (ctx) -> ignored
    on_before_response = add_timestamp                # (ctx, result) -> new result | None
    on_error = [status_error_handler]                 # (ctx, error) -> mapping | None

Each hook may be ``def`` or ``async def``. A single callable is coerced
to a one-element tuple. No base class required.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from wren._internal.types import ErrorHook, RequestHook, ResponseHook

HOOK_NAMES = ("on_request", "on_before_response", "on_error")

# camelCase spellings are accepted when hooks come from a mapping
_HOOK_ALIASES = {
    "onRequest": "on_request",
    "onBeforeResponse": "on_before_response",
    "onError": "on_error",
}


def normalize_hooks(value: Any, name: str = "hook") -> tuple[Callable[..., Any], ...]:
    """Coerce ``None``, a callable, or an iterable of callables to a tuple.

    Raises ``TypeError`` for anything that is not callable.
    """
    if value is None:
        return ()
    if callable(value):
        return (value,)
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        msg = f"{name} must be a callable or a list of callables, got {type(value).__name__}"
        raise TypeError(msg)
    hooks = tuple(value)
    for hook in hooks:
        if not callable(hook):
            msg = f"{name} entries must be callable, got {type(hook).__name__}"
            raise TypeError(msg)
    return hooks


@dataclass(frozen=True, slots=True)
class MiddlewareSet:
    """The ordered hooks attached to exactly one route."""

    on_request: tuple[RequestHook, ...] = ()
    on_before_response: tuple[ResponseHook, ...] = ()
    on_error: tuple[ErrorHook, ...] = ()

    @classmethod
    def build(
        cls,
        *,
        on_request: Any = None,
        on_before_response: Any = None,
        on_error: Any = None,
    ) -> MiddlewareSet:
        """Build a set from loosely-typed values (callable, list, or None)."""
        return cls(
            on_request=normalize_hooks(on_request, "on_request"),
            on_before_response=normalize_hooks(on_before_response, "on_before_response"),
            on_error=normalize_hooks(on_error, "on_error"),
        )

    @classmethod
    def from_mapping(cls, hooks: Mapping[str, Any]) -> MiddlewareSet:
        """Build a set from ``{"on_request": ..., ...}`` (camelCase keys accepted)."""
        values: dict[str, Any] = {}
        for key, value in hooks.items():
            name = _HOOK_ALIASES.get(key, key)
            if name not in HOOK_NAMES:
                msg = f"Unknown hook {key!r}; expected one of {', '.join(HOOK_NAMES)}"
                raise TypeError(msg)
            values[name] = value
        return cls.build(**values)

    def __bool__(self) -> bool:
        return bool(self.on_request or self.on_before_response or self.on_error)

    def combine(self, other: MiddlewareSet) -> MiddlewareSet:
        """Concatenate hooks: this set's run first, then *other*'s."""
        return MiddlewareSet(
            on_request=self.on_request + other.on_request,
            on_before_response=self.on_before_response + other.on_before_response,
            on_error=self.on_error + other.on_error,
        )
