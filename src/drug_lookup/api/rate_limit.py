"""Per-client request throttling for the API routes.

Two limiters are kept in app.state: one for the public search route,
keyed by client address, and one for the user routes, keyed by user id.
"""

import math
import threading
import time
from collections import defaultdict
from typing import Callable

from drug_lookup.config import settings


class RateLimiter:
    """Sliding-window request limiter.

    A client may make at most ``max_requests`` requests in any span of
    ``window_seconds``. Rejected requests are not counted.

    Example:
        ```python
        limiter = RateLimiter(max_requests=30, window_seconds=60)
        if not limiter.is_allowed(request.client.host):
            raise HTTPException(status_code=429)
        ```
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            max_requests: Requests allowed per window (at least 1).
            window_seconds: Length of the sliding window in seconds.
            clock: Returns the current Unix time. Injectable for tests.
        """
        if max_requests < 1 or window_seconds <= 0:
            raise ValueError("max_requests and window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: dict[str, list[float]] = defaultdict(list)
        self._lock = threading.Lock()
        self._clock = clock

    @classmethod
    def for_search(cls) -> "RateLimiter":
        """Limiter for the public search route, from settings."""
        return cls(settings.search_rate_limit, settings.rate_limit_window)

    @classmethod
    def for_user_routes(cls) -> "RateLimiter":
        """Limiter for the authenticated user routes, from settings."""
        return cls(settings.api_rate_limit, settings.rate_limit_window)

    def _recent(self, client_id: str, now: float) -> list[float]:
        recent = [t for t in self._requests[client_id] if now - t < self.window_seconds]
        self._requests[client_id] = recent
        return recent

    def is_allowed(self, client_id: str) -> bool:
        """Record a request for the client; False if it is over the limit."""
        now = self._clock()
        with self._lock:
            recent = self._recent(client_id, now)
            if len(recent) >= self.max_requests:
                return False
            recent.append(now)
            return True

    def retry_after(self, client_id: str) -> int:
        """Seconds until the client may make another request."""
        now = self._clock()
        with self._lock:
            recent = self._recent(client_id, now)
            if len(recent) < self.max_requests:
                return 0
            return max(1, math.ceil(recent[0] + self.window_seconds - now))

    def reset_client(self, client_id: str) -> None:
        """Forget all requests recorded for a client."""
        with self._lock:
            self._requests.pop(client_id, None)
