"""
Fixed-window rate limiting.

RateLimitStore holds one entry per caller for the current window and is owned
by a RateLimiter stage; both are built per application so tests can supply
their own clock.

Dependencies: starlette, gateway.core
System role: Third stage of the request pipeline
"""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from starlette.requests import Request

from gateway.core.context import RequestContext
from gateway.core.exceptions import RateLimitedError
from gateway.core.routes import is_health_path, is_protected_path
from gateway.security.client_identity import ClientIdentity

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class RateLimitEntry:
    """Request count for one caller within its current window."""

    count: int
    window_reset_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.window_reset_at


class RateLimitStore:
    """In-memory map of caller key to rate limit entry."""

    def __init__(self, window_seconds: float, clock: Clock = time.time) -> None:
        """
        Initialize store.

        Args:
            window_seconds: Window length in seconds
            clock: Returns the current time as epoch seconds
        """
        self.window_seconds = window_seconds
        self.clock = clock
        self._entries: dict[str, RateLimitEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> RateLimitEntry | None:
        return self._entries.get(key)

    def sweep(self, now: float | None = None) -> int:
        """
        Remove entries whose window has elapsed.

        Args:
            now: Current time (defaults to the store clock)

        Returns:
            int: Number of entries removed
        """
        now = self.clock() if now is None else now
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def hit(self, key: str, now: float | None = None) -> RateLimitEntry:
        """
        Record one request for a caller.

        Starts a new window when the caller has no live entry, otherwise
        increments the current one.

        Args:
            key: Caller key
            now: Current time (defaults to the store clock)

        Returns:
            RateLimitEntry: The caller's entry after this request
        """
        now = self.clock() if now is None else now
        entry = self._entries.get(key)

        if entry is None or entry.is_expired(now):
            entry = RateLimitEntry(count=1, window_reset_at=now + self.window_seconds)
            self._entries[key] = entry
        else:
            entry.count += 1

        return entry


class RateLimiter:
    """Allows the first N requests per caller per window on NetSuite routes."""

    def __init__(self, store: RateLimitStore, max_requests: int) -> None:
        """
        Initialize rate limiter.

        Args:
            store: Entry store (owns window length and clock)
            max_requests: Requests allowed per window
        """
        self.store = store
        self.max_requests = max_requests

    def applies_to(self, request: Request) -> bool:
        path = request.url.path
        return is_protected_path(path) and not is_health_path(path)

    async def process(self, request: Request, context: RequestContext) -> None:
        """
        Count the request against the caller's quota.

        Args:
            request: Inbound request
            context: Pipeline context (receives rate limit headers)

        Raises:
            RateLimitedError: When the caller has exceeded its quota
        """
        if not self.applies_to(request):
            return

        identity = ClientIdentity.from_request(request)
        context.client_id = identity.value

        # No await between sweep, lookup and update
        now = self.store.clock()
        self.store.sweep(now)
        entry = self.store.hit(identity.value, now)

        if entry.count > self.max_requests:
            retry_after = max(1, math.ceil(entry.window_reset_at - now))
            headers = self._headers(entry, remaining=0)
            context.set_headers(headers)

            logger.warning(
                "Rate limit exceeded",
                extra={
                    "client_id": identity.value,
                    "requests": entry.count,
                    "max_requests": self.max_requests,
                },
            )
            raise RateLimitedError(retry_after, headers=headers)

        context.set_headers(self._headers(entry, remaining=self.max_requests - entry.count))

    def _headers(self, entry: RateLimitEntry, remaining: int) -> dict[str, str]:
        reset_at = datetime.fromtimestamp(entry.window_reset_at, tz=timezone.utc)
        return {
            "X-RateLimit-Limit": str(self.max_requests),
            "X-RateLimit-Remaining": str(max(0, remaining)),
            "X-RateLimit-Reset": reset_at.isoformat().replace("+00:00", "Z"),
        }
