"""Raw ASGI type aliases.

Only ``wren.server`` and ``wren.testing`` touch ASGI messages directly;
everything else works with ``Request`` and ``ResponseWriter``.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

Scope: TypeAlias = MutableMapping[str, Any]
Message: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[Message]]
Send: TypeAlias = Callable[[Message], Awaitable[None]]
