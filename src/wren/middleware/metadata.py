"""Response decorators -- ``on_before_response`` hooks that enrich results.

Both hooks only touch mapping results; anything else passes through
unchanged. They never mutate the handler's object, a new dict is
returned instead.
"""

import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from wren.context import RequestContext


def _utc_timestamp() -> str:
    now = datetime.now(UTC)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def add_timestamp(ctx: RequestContext, result: Any) -> Any:
    """Add an ISO-8601 UTC ``timestamp`` field to mapping results."""
    if isinstance(result, Mapping):
        return {**result, "timestamp": _utc_timestamp()}
    return result


async def add_response_metadata(ctx: RequestContext, result: Any) -> Any:
    """Add ``meta = {requestId, path, method}`` to mapping results."""
    if isinstance(result, Mapping):
        return {
            **result,
            "meta": {
                "requestId": uuid.uuid4().hex[:12],
                "path": ctx.path,
                "method": ctx.method,
            },
        }
    return result
