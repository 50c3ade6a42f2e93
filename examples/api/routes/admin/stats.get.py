"""GET /admin/stats -- bearer token with the admin role."""

import store

from wren.middleware import require_admin, require_auth, status_error_handler

on_request = [require_auth, require_admin]
on_error = status_error_handler


def default(ctx):
    return {"items": len(store.all_items())}
