"""Cache storage protocol.

Defines the interface for the lookaside cache used by the lookup service.
Values are JSON-compatible payloads (a drug record dict, or a list of them),
so any backend that can store a string under a key with a TTL will do.

Implementations:
- In-process dictionary (default)
- Redis
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for TTL key-value cache backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Example:
        ```python
        from drug_lookup.protocols import CacheStore

        cache: CacheStore = InMemoryCacheRepository()
        cache: CacheStore = RedisCacheRepository.create()
        ```
    """

    def put(self, key: str, value: Any, ttl: int) -> None:
        """Store a value, overwriting any existing entry.

        Args:
            key: The cache key
            value: JSON-compatible payload
            ttl: Time-to-live in seconds
        """
        ...

    def get(self, key: str) -> Any | None:
        """Read a value.

        Args:
            key: The cache key

        Returns:
            The stored payload, or None if absent or expired
        """
        ...

    def delete(self, key: str) -> bool:
        """Remove an entry if present.

        Args:
            key: The cache key

        Returns:
            True if an entry was removed, False if there was none
        """
        ...

    def health_check(self) -> bool:
        """Check if the backend is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...
