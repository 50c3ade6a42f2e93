"""Header-based access checks for ``on_request``.

These are deliberately small: ``require_auth`` only checks that a
bearer token is present, ``require_admin`` that the header names the
admin role. Real token verification belongs in the application.
"""

from wren.context import RequestContext
from wren.errors import ClientError

BEARER_PREFIX = "Bearer "


async def require_auth(ctx: RequestContext) -> None:
    """Reject the request with 401 unless it carries ``Authorization: Bearer ...``."""
    header = ctx.headers.get("authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        raise ClientError(
            401,
            "Authentication token required",
            headers=(("WWW-Authenticate", "Bearer"),),
        )
    ctx.state["auth_token"] = header[len(BEARER_PREFIX) :]


async def require_admin(ctx: RequestContext) -> None:
    """Reject the request with 403 unless the ``Authorization`` header contains ``admin``."""
    header = ctx.headers.get("authorization")
    if not header or "admin" not in header:
        raise ClientError(403, "Administrator permissions required")
    ctx.state["is_admin"] = True
