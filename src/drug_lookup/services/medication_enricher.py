"""Enrichment of a user's saved medication page with drug records."""

import asyncio
import logging

from drug_lookup.entities import DrugRecord, MedicationPage
from drug_lookup.errors import DetailUnavailable, NotFound
from drug_lookup.services.drug_lookup_service import DrugLookupService

logger = logging.getLogger(__name__)


class MedicationEnricher:
    """Joins stored medication identifiers to drug records.

    Unlike search, a row that cannot be resolved fails the whole call.
    """

    def __init__(self, lookup_service: DrugLookupService) -> None:
        self._lookup = lookup_service

    async def enrich(self, identifiers: list[str] | tuple[str, ...]) -> list[DrugRecord]:
        """Resolve every identifier, keeping input order.

        Args:
            identifiers: Saved RxCUIs in page order

        Returns:
            One drug record per identifier

        Raises:
            DetailUnavailable: If any identifier cannot be resolved
        """
        semaphore = asyncio.Semaphore(self._lookup.max_concurrency)

        async def resolve(identifier: str) -> DrugRecord:
            async with semaphore:
                try:
                    return await self._lookup.detail_cached(identifier)
                except NotFound as e:
                    logger.warning("Cannot enrich saved medication %s: %s", identifier, e)
                    raise DetailUnavailable(identifier) from e

        return list(await asyncio.gather(*(resolve(i) for i in identifiers)))

    async def enrich_page(self, page: MedicationPage[str]) -> MedicationPage[DrugRecord]:
        """Enrich a page, passing its pagination metadata through untouched."""
        records = await self.enrich(page.items)
        return page.with_items(records)
