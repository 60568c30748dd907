"""In-process implementation of CacheStore.

Entries expire lazily: there is no sweeper, but an expired entry is
dropped the first time it is read and never returned.
"""

import threading
import time
from typing import Any, Callable

from drug_lookup.entities import CacheEntry


class InMemoryCacheRepository:
    """Dictionary-backed lookaside cache.

    This class satisfies the CacheStore protocol through structural
    typing. A lock makes each put/get/delete atomic, so request handlers
    running on different threads can share one instance.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize an empty cache.

        Args:
            clock: Returns the current Unix time. Injectable for tests.
        """
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock

    @classmethod
    def create(cls) -> "InMemoryCacheRepository":
        """Factory method to create an empty in-memory cache."""
        return cls()

    def put(self, key: str, value: Any, ttl: int) -> None:
        """Store a payload, overwriting any existing entry."""
        entry = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
        with self._lock:
            self._entries[key] = entry

    def get(self, key: str) -> Any | None:
        """Read a payload; None when absent or past its TTL."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def delete(self, key: str) -> bool:
        """Remove an entry if present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def health_check(self) -> bool:
        """An in-process cache is always reachable."""
        return True
