"""Invoke helpers -- call sync or async handlers uniformly.

Route handlers, hooks, and proxy handlers can be ``def`` or
``async def``. Any code that calls a user-provided callable must handle
both cases. This module provides a single helper so the sync/async check
lives in exactly one place.

Usage::

    from wren._internal.invoke import invoke

    result = await invoke(handler, context)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        def get(ctx):
            return {"id": ctx.params["id"]}

        async def post(ctx):
            item = await store.create(ctx.body)
            return {"id": item.id}
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
