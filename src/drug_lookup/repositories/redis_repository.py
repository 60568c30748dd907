"""Redis implementation of CacheStore.

Payloads are stored as JSON strings with a native Redis expiry, so an
expired key is simply gone and a read can never return a stale value.
"""

import json
import logging
from typing import Any

import redis

from drug_lookup.config import get_redis_client, settings

logger = logging.getLogger(__name__)


class RedisCacheRepository:
    """Redis implementation of the lookaside cache.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Every key is namespaced with a prefix so several deployments can share
    one Redis database.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            key_prefix: Namespace for all keys. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.cache_key_prefix

    @classmethod
    def create(cls, key_prefix: str | None = None) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with defaults.

        Args:
            key_prefix: Key namespace. If None, uses settings.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def put(self, key: str, value: Any, ttl: int) -> None:
        """Store a payload with a TTL, overwriting any existing entry.

        Args:
            key: The cache key
            value: JSON-compatible payload
            ttl: Time-to-live in seconds
        """
        self._client.set(self._key(key), json.dumps(value), ex=ttl)

    def get(self, key: str) -> Any | None:
        """Read a payload.

        Args:
            key: The cache key

        Returns:
            The decoded payload, or None if absent or expired
        """
        raw = self._client.get(self._key(key))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding undecodable cache entry %s", key)
            self._client.delete(self._key(key))
            return None

    def delete(self, key: str) -> bool:
        """Delete an entry by key.

        Args:
            key: The cache key

        Returns:
            True if deleted, False otherwise
        """
        result: int = self._client.delete(self._key(key))  # type: ignore[assignment]
        return result > 0

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            result = self._client.ping()
            return bool(result)
        except redis.RedisError:
            return False
