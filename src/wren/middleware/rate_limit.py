"""In-memory sliding-window rate limiting for ``on_request``.

State is process-wide and lives behind ``RateLimitStore.record``, which
holds a lock for the whole check-and-update so concurrent workers (or
free-threaded builds) never lose a count. Multi-process deployments need
an external store; anything with the same ``record(key) -> bool``
method can be passed to ``rate_limit``.
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import Protocol

from wren.context import RequestContext
from wren.errors import ClientError

logger = logging.getLogger("wren.middleware")


class RateLimitBackend(Protocol):
    def record(self, key: str) -> bool: ...


class RateLimitStore:
    """Per-key request timestamps within a sliding window.

    ``record(key)`` adds a hit and returns ``False`` once the key has
    made more than ``max_requests`` requests in the last
    ``window_seconds``.
    """

    __slots__ = ("_clock", "_hits", "_last_sweep", "_lock", "max_requests", "window_seconds")

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            msg = "max_requests must be at least 1"
            raise ValueError(msg)
        if window_seconds <= 0:
            msg = "window_seconds must be positive"
            raise ValueError(msg)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._hits: dict[str, list[float]] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        return len(self._hits)

    def record(self, key: str) -> bool:
        """Record one request for *key*; ``True`` while it is within the limit.

        Refused requests are recorded too, so a client that keeps retrying
        stays limited until it backs off for a whole window.
        """
        now = self._clock()
        window_start = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(window_start)
                self._last_sweep = now
            hits = [t for t in self._hits.get(key, ()) if t > window_start]
            hits.append(now)
            self._hits[key] = hits
            return len(hits) <= self.max_requests

    def _sweep(self, window_start: float) -> None:
        # Caller holds the lock. A key's newest hit is its last one.
        stale = [key for key, hits in self._hits.items() if hits[-1] <= window_start]
        for key in stale:
            del self._hits[key]

    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key."""
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)


def rate_limit(
    store: RateLimitBackend | None = None,
) -> Callable[[RequestContext], None]:
    """Build an ``on_request`` hook that raises 429 when *store* says no.

    Requests are keyed by client address (first ``x-forwarded-for`` hop,
    else the socket peer).
    """
    backend = store if store is not None else RateLimitStore()

    def check_rate_limit(ctx: RequestContext) -> None:
        key = ctx.client_address
        if not backend.record(key):
            logger.info("Rate limit exceeded for %s on %s %s", key, ctx.method, ctx.path)
            raise ClientError(429, "Too many requests")

    return check_rate_limit


default_store = RateLimitStore()
rate_limit_hook = rate_limit(default_store)
