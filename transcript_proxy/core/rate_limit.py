"""Per-client request limiting for the /api/ routes.

Counters live in a `limits` storage backend; `MemoryStorage` is guarded by a lock so
concurrent requests cannot over-admit. A moving window is used, so a client regains
capacity as its oldest request ages out rather than at fixed boundaries.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, Storage
from limits.strategies import MovingWindowRateLimiter

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after_seconds: int
    window_seconds: int

    def headers(self) -> dict[str, str]:
        """Standard `RateLimit-*` headers (no legacy `X-RateLimit-*`)."""

        out = {
            "RateLimit-Policy": f"{self.limit};w={self.window_seconds}",
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after_seconds),
        }
        if not self.allowed:
            out["Retry-After"] = str(self.reset_after_seconds)
        return out


class RateLimiter:
    """Allow at most `max_requests` per `window_seconds` for each client key."""

    def __init__(
        self,
        *,
        max_requests: int,
        window_seconds: int,
        storage: Storage | None = None,
    ):
        self._item = RateLimitItemPerSecond(max_requests, window_seconds)
        self._limiter = MovingWindowRateLimiter(storage or MemoryStorage())
        self._window_seconds = window_seconds

    def check(self, client_key: str) -> RateLimitDecision:
        """Record one request for `client_key` if capacity remains."""

        allowed = self._limiter.hit(self._item, client_key)
        stats = self._limiter.get_window_stats(self._item, client_key)
        reset_after = max(0, math.ceil(stats.reset_time - time.time()))
        return RateLimitDecision(
            allowed=allowed,
            limit=self._item.amount,
            remaining=max(0, stats.remaining),
            reset_after_seconds=reset_after,
            window_seconds=self._window_seconds,
        )

    def allow(self, client_key: str) -> bool:
        return self.check(client_key).allowed

    def reset(self) -> None:
        self._limiter.storage.reset()
