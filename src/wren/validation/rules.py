"""Built-in validation rules.

Each validator is a callable with the signature::

    def rule(value: Any) -> str | None:
        '''Return error message, or None if valid.'''

Values come from decoded JSON bodies, query strings, or route
parameters, so a rule must not assume it receives a ``str``.

Parameterized validators are factory functions that return a validator::

    def max_length(n: int) -> Validator:
        def check(value: Any) -> str | None:
            if len(str(value)) > n:
                return f"Must be at most {n} characters"
            return None
        return check
"""

import re
from collections.abc import Callable
from typing import Any

type Validator = Callable[[Any], str | None]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(value: Any) -> str | None:
    """Field must be present and non-empty."""
    if _is_blank(value):
        return "This field is required"
    return None


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def max_length(n: int) -> Validator:
    """String (or list) must be at most *n* long."""

    def check(value: Any) -> str | None:
        if len(value if isinstance(value, (str, list, tuple)) else str(value)) > n:
            return f"Must be at most {n} characters"
        return None

    return check


def min_length(n: int) -> Validator:
    """String (or list) must be at least *n* long."""

    def check(value: Any) -> str | None:
        if len(value if isinstance(value, (str, list, tuple)) else str(value)) < n:
            return f"Must be at least {n} characters"
        return None

    return check


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Basic email pattern, checks structure not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def email(value: Any) -> str | None:
    """Value must be a valid email address (basic format check)."""
    if not isinstance(value, str) or not _EMAIL_RE.match(value):
        return "Must be a valid email address"
    return None


_URL_RE = re.compile(r"^https?://[^\s/$.?#].\S*$", re.IGNORECASE)


def url(value: Any) -> str | None:
    """Value must be a valid URL (http/https)."""
    if not isinstance(value, str) or not _URL_RE.match(value):
        return "Must be a valid URL"
    return None


def matches(pattern: str, message: str | None = None) -> Validator:
    """Value must match the given regex pattern."""
    compiled = re.compile(pattern)

    def check(value: Any) -> str | None:
        if not compiled.match(str(value)):
            return message or f"Must match pattern: {pattern}"
        return None

    return check


# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


def one_of(*choices: Any) -> Validator:
    """Value must be one of the given choices."""
    allowed = frozenset(choices)

    def check(value: Any) -> str | None:
        try:
            ok = value in allowed
        except TypeError:
            ok = False
        if not ok:
            options = ", ".join(sorted(str(c) for c in allowed))
            return f"Must be one of: {options}"
        return None

    return check


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


def string(value: Any) -> str | None:
    """Value must be a string."""
    if not isinstance(value, str):
        return "Must be a string"
    return None


def integer(value: Any) -> str | None:
    """Value must be an integer, or a string holding one (query and path values)."""
    if isinstance(value, bool):
        return "Must be a whole number"
    if isinstance(value, int):
        return None
    try:
        int(value)
    except (ValueError, TypeError):
        return "Must be a whole number"
    return None


def number(value: Any) -> str | None:
    """Value must be a number (int or float), or a string holding one."""
    if isinstance(value, bool):
        return "Must be a number"
    try:
        float(value)
    except (ValueError, TypeError):
        return "Must be a number"
    return None


def boolean(value: Any) -> str | None:
    """Value must be a boolean, or ``"true"``/``"false"``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.lower() in {"true", "false"}:
        return None
    return "Must be true or false"
