"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload with an absolute expiry time.

    Attributes:
        key: The cache key
        value: JSON-compatible payload
        expires_at: Unix timestamp after which the entry is logically absent
    """

    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check whether the entry has outlived its TTL."""
        return self.expires_at <= now
