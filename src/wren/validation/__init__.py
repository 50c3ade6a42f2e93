"""Payload validation -- composable rules, clean results.

Usage::

    from wren.validation import validate, required, max_length, email

    def post(ctx):
        result = validate(ctx.body or {}, {
            "name": [required, max_length(100)],
            "email": [required, email],
        })
        if not result:
            raise ClientError(400, "Validation failed", details=result.details())

Route files normally attach this through ``wren.middleware.validate_body``.
"""

from collections.abc import Mapping
from typing import Any

from wren.validation.result import ValidationResult
from wren.validation.rules import (
    Validator,
    boolean,
    email,
    integer,
    matches,
    max_length,
    min_length,
    number,
    one_of,
    required,
    string,
    url,
)

__all__ = [
    "ValidationResult",
    "Validator",
    "boolean",
    "email",
    "integer",
    "matches",
    "max_length",
    "min_length",
    "number",
    "one_of",
    "required",
    "string",
    "url",
    "validate",
]


def validate(
    data: Mapping[str, Any],
    rules: Mapping[str, list[Validator]],
) -> ValidationResult:
    """Validate a mapping against a set of rules.

    Args:
        data: Decoded JSON body, query dict, or route params.
        rules: Field name to list of validators. Each validator returns
            an error message on failure, or ``None`` on success.

    A field that is missing (or blank) and has no ``required`` rule is
    skipped: its other validators do not run and it is left out of
    ``data``. Fields without rules are dropped from ``data``.
    """
    errors: dict[str, list[str]] = {}
    cleaned: dict[str, Any] = {}

    for field_name, validators in rules.items():
        value = data.get(field_name)
        if required not in validators and (value is None or value == ""):
            continue

        field_errors: list[str] = []
        for validator in validators:
            error = validator(value)
            if error is not None:
                field_errors.append(error)
                # no point running max_length on a missing value
                if validator is required:
                    break

        if field_errors:
            errors[field_name] = field_errors
        else:
            cleaned[field_name] = value

    return ValidationResult(data=cleaned, errors=errors)
