"""``on_request`` hooks that validate the context with ``wren.validation`` rules.

Each factory takes a rules mapping and returns a hook that replaces the
validated part of the context with the cleaned data, or raises a 400
``ClientError`` whose ``details`` list every failing field::

    on_request = [validate_body({"name": [required, max_length(50)]})]
"""

from collections.abc import Callable, Mapping
from typing import Any

from wren.context import RequestContext
from wren.errors import ClientError
from wren.validation import ValidationResult, Validator, validate

type Rules = Mapping[str, list[Validator]]


def _check(data: Any, rules: Rules, message: str) -> ValidationResult:
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ClientError(
            400,
            message,
            details=[{"field": "", "message": "Expected an object"}],
        )
    result = validate(data, rules)
    if not result:
        raise ClientError(400, message, details=result.details())
    return result


def _mark(ctx: RequestContext, part: str) -> None:
    ctx.state.setdefault("validated", {})[part] = True


def validate_body(rules: Rules) -> Callable[[RequestContext], None]:
    """Validate ``ctx.body``; failure is ``400 Validation failed``."""

    def check_body(ctx: RequestContext) -> None:
        ctx.body = _check(ctx.body, rules, "Validation failed").data
        _mark(ctx, "body")

    return check_body


def validate_query(rules: Rules) -> Callable[[RequestContext], None]:
    """Validate ``ctx.query``; failure is ``400 Invalid query parameters``."""

    def check_query(ctx: RequestContext) -> None:
        ctx.query = _check(ctx.query, rules, "Invalid query parameters").data
        _mark(ctx, "query")

    return check_query


def validate_params(rules: Rules) -> Callable[[RequestContext], None]:
    """Validate ``ctx.params``; failure is ``400 Invalid URL parameters``.

    Parameters without rules are kept, since the router put them there.
    """

    def check_params(ctx: RequestContext) -> None:
        cleaned = _check(ctx.params, rules, "Invalid URL parameters").data
        ctx.params = {**ctx.params, **cleaned}
        _mark(ctx, "params")

    return check_params
