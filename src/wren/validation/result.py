"""Validation result -- immutable container for cleaned data or errors."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating a payload against a set of rules.

    The result is falsy when invalid, so you can write::

        result = validate(ctx.body, rules)
        if not result:
            raise ClientError(400, "Validation failed", details=result.details())

    ``data`` contains the values of every validated field that was
    present. ``errors`` maps field names to lists of error messages::

        {"name": ["This field is required"],
         "email": ["Must be a valid email address"]}
    """

    data: dict[str, Any]
    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid

    def details(self) -> list[dict[str, str]]:
        """Flatten errors into ``[{"field": ..., "message": ...}]`` for JSON bodies."""
        return [
            {"field": field_name, "message": message}
            for field_name, messages in self.errors.items()
            for message in messages
        ]
