"""User medication list operations.

Listing goes through the enricher; adding and deleting are guarded by
an upstream validity check on the identifier.
"""

import logging

from drug_lookup.clients import TerminologyClient
from drug_lookup.entities import DrugRecord, MedicationPage, UserMedication
from drug_lookup.errors import InvalidIdentifier, MedicationAlreadyExists, MedicationNotFound
from drug_lookup.protocols import UserMedicationStore
from drug_lookup.services.medication_enricher import MedicationEnricher

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 500


class MedicationService:
    """Manage a user's saved medications."""

    def __init__(
        self,
        store: UserMedicationStore,
        terminology_client: TerminologyClient,
        enricher: MedicationEnricher,
    ) -> None:
        """Initialize the medication service.

        Args:
            store: Storage for users' saved identifiers.
            terminology_client: Used to validate identifiers before mutations.
            enricher: Resolves saved identifiers to drug records.
        """
        self._store = store
        self._client = terminology_client
        self._enricher = enricher

    async def list_medications(
        self,
        user_id: str,
        page: int = 1,
        per_page: int = 10,
    ) -> MedicationPage[DrugRecord]:
        """Return one enriched page of the user's list.

        Raises:
            ValueError: If page or per_page is out of range
            DetailUnavailable: If a saved row cannot be resolved
        """
        if page < 1:
            raise ValueError("page must be at least 1")
        if not 1 <= per_page <= MAX_PER_PAGE:
            raise ValueError(f"per_page must be between 1 and {MAX_PER_PAGE}")

        stored = self._store.paginate(user_id, page, per_page)
        return await self._enricher.enrich_page(stored)

    async def add_medication(self, user_id: str, identifier: str) -> UserMedication:
        """Save a drug on the user's list.

        Raises:
            MedicationAlreadyExists: If the drug is already saved
            InvalidIdentifier: If RxNav does not recognise the identifier
        """
        if self._store.find(user_id, identifier) is not None:
            raise MedicationAlreadyExists(identifier)

        if not await self._client.validate(identifier):
            raise InvalidIdentifier(identifier)

        medication = self._store.add(user_id, identifier)
        logger.info("Added rxcui=%s to medication list of user=%s", identifier, user_id)
        return medication

    async def delete_medication(self, user_id: str, identifier: str) -> None:
        """Remove a drug from the user's list.

        Raises:
            InvalidIdentifier: If RxNav does not recognise the identifier
            MedicationNotFound: If the drug is not on the user's list
        """
        if not await self._client.validate(identifier):
            raise InvalidIdentifier(identifier)

        if not self._store.remove(user_id, identifier):
            raise MedicationNotFound(identifier)
        logger.info("Removed rxcui=%s from medication list of user=%s", identifier, user_id)
