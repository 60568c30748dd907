"""Drug lookup service: cache-aside orchestration.

This service coordinates the terminology client (upstream data) and the
cache store (lookaside cache). It is the only place caching policy lives.
"""

import asyncio
import logging

from drug_lookup.clients import TerminologyClient
from drug_lookup.config import settings
from drug_lookup.entities import DrugRecord
from drug_lookup.errors import NotFound
from drug_lookup.protocols import CacheStore

logger = logging.getLogger(__name__)

SEARCH_KEY_PREFIX = "drug_search"
DETAILS_KEY_PREFIX = "drug_details"


def search_cache_key(name: str) -> str:
    """Cache key for an assembled search result; the name is used verbatim."""
    return f"{SEARCH_KEY_PREFIX}:{name}"


def details_cache_key(identifier: str) -> str:
    """Cache key for a single drug record."""
    return f"{DETAILS_KEY_PREFIX}:{identifier}"


class DrugLookupService:
    """Cached drug search and detail lookup.

    This service depends on the CacheStore PROTOCOL, so the same code runs
    against the in-memory cache in tests and Redis in production.

    Example:
        ```python
        service = DrugLookupService.create(
            terminology_client=TerminologyClient.create(),
            cache=InMemoryCacheRepository.create(),
        )
        records = await service.search_by_name("lipitor")
        ```
    """

    def __init__(
        self,
        terminology_client: TerminologyClient,
        cache: CacheStore,
        ttl: int | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        """Initialize the lookup service.

        Args:
            terminology_client: Upstream RxNav client (required).
            cache: Lookaside cache backend (required).
            ttl: Time-to-live for cache entries in seconds. Defaults to settings.
            max_concurrency: Parallel detail lookups per call. Defaults to settings.
        """
        self._client = terminology_client
        self._cache = cache
        self._ttl = ttl or settings.cache_ttl
        self._max_concurrency = max_concurrency or settings.max_concurrent_lookups

    @classmethod
    def create(
        cls,
        terminology_client: TerminologyClient,
        cache: CacheStore,
        ttl: int | None = None,
    ) -> "DrugLookupService":
        """Factory method to create DrugLookupService with sensible defaults.

        Args:
            terminology_client: Upstream RxNav client (required).
            cache: Lookaside cache backend (required).
            ttl: Time-to-live in seconds. If None, uses settings.

        Returns:
            Configured DrugLookupService instance
        """
        return cls(terminology_client=terminology_client, cache=cache, ttl=ttl)

    async def search_by_name(self, name: str) -> list[DrugRecord]:
        """Search drugs by name, returning fully resolved records.

        Business logic:
        1. Return the cached result set for this exact name if present
        2. Otherwise ask RxNav for candidate identifiers
        3. Resolve each candidate through the detail cache, dropping any
           candidate whose details cannot be found
        4. Cache the assembled list and return it

        Args:
            name: Drug name, used verbatim as part of the cache key

        Returns:
            Drug records in upstream candidate order (possibly empty)

        Raises:
            UpstreamUnavailable: If the search call itself fails
        """
        key = search_cache_key(name)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Search cache hit for name=%r", name)
            return [DrugRecord.from_dict(item) for item in cached]

        logger.debug("Search cache miss for name=%r", name)
        candidates = await self._client.search(name)
        resolved = await self._gather_details(candidates)

        records: list[DrugRecord] = []
        for identifier, outcome in zip(candidates, resolved):
            if isinstance(outcome, NotFound):
                logger.warning("Skipping search candidate %s for name=%r: %s", identifier, name, outcome)
                continue
            records.append(outcome)

        self._cache.put(key, [record.to_dict() for record in records], self._ttl)
        return records

    async def detail_cached(self, identifier: str) -> DrugRecord:
        """Get the drug record for an identifier, through the cache.

        A failed upstream lookup purges any entry for the identifier, so a
        previously cached record cannot outlive the concept's deactivation.

        Args:
            identifier: RxCUI to resolve

        Returns:
            The drug record

        Raises:
            NotFound: If RxNav has no detail record for the identifier
        """
        key = details_cache_key(identifier)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Details cache hit for rxcui=%s", identifier)
            return DrugRecord.from_dict(cached)

        try:
            record = await self._client.detail(identifier)
        except NotFound:
            self._cache.delete(key)
            raise

        self._cache.put(key, record.to_dict(), self._ttl)
        return record

    async def get_details(self, identifier: str) -> DrugRecord:
        """Detail-by-identifier lookup; failure is fatal for the caller."""
        return await self.detail_cached(identifier)

    async def _gather_details(self, identifiers: list[str]) -> list[DrugRecord | NotFound]:
        """Resolve identifiers concurrently, keeping input order.

        NotFound is returned in place of the record; anything else raises.
        """
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def resolve(identifier: str) -> DrugRecord | NotFound:
            async with semaphore:
                try:
                    return await self.detail_cached(identifier)
                except NotFound as e:
                    return e

        return list(await asyncio.gather(*(resolve(i) for i in identifiers)))

    @property
    def max_concurrency(self) -> int:
        """Get the per-call limit on parallel detail lookups."""
        return self._max_concurrency

    @property
    def ttl(self) -> int:
        """Get the cache TTL in seconds."""
        return self._ttl

    @property
    def cache(self) -> CacheStore:
        """Get the underlying cache (for testing)."""
        return self._cache

    @property
    def terminology_client(self) -> TerminologyClient:
        """Get the underlying terminology client (for testing)."""
        return self._client
