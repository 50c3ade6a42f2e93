"""Route hooks -- plain callables, no inheritance required.

A route module attaches hooks by exporting ``on_request``,
``on_before_response`` and ``on_error`` (a callable or a list)::

    on_request = [rate_limit_hook, require_auth]       # (ctx) -> ignored
    on_before_response = add_timestamp                 # (ctx, result) -> result | None
    on_error = status_error_handler                    # (ctx, error) -> mapping | None

Built-in hooks:
    add_timestamp / add_response_metadata -- enrich mapping results
    require_auth / require_admin -- header checks (401 / 403)
    rate_limit / rate_limit_hook -- sliding-window limiter (429)
    validate_body / validate_query / validate_params -- rule validation (400)
    status_error_handler -- uniform 401/403/429 bodies
"""

from wren.middleware.auth import require_admin, require_auth
from wren.middleware.errors import status_error_handler
from wren.middleware.metadata import add_response_metadata, add_timestamp
from wren.middleware.protocol import HOOK_NAMES, MiddlewareSet, normalize_hooks
from wren.middleware.rate_limit import RateLimitStore, rate_limit, rate_limit_hook
from wren.middleware.utils import (
    combine_middlewares,
    create_middleware,
    error_response,
    success_response,
)
from wren.middleware.validation import validate_body, validate_params, validate_query

__all__ = [
    "HOOK_NAMES",
    "MiddlewareSet",
    "RateLimitStore",
    "add_response_metadata",
    "add_timestamp",
    "combine_middlewares",
    "create_middleware",
    "error_response",
    "normalize_hooks",
    "rate_limit",
    "rate_limit_hook",
    "require_admin",
    "require_auth",
    "status_error_handler",
    "success_response",
    "validate_body",
    "validate_params",
    "validate_query",
]
