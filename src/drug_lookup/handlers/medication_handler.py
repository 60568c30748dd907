"""HTTP handlers for the caller's medication list."""

from fastapi import HTTPException, status

from drug_lookup.dto import AddMedicationRequest, MedicationListResponse, SavedMedicationResponse
from drug_lookup.errors import DrugLookupError
from drug_lookup.handlers.errors import to_http_exception
from drug_lookup.services import MedicationService


class MedicationHandler:
    """HTTP handlers for listing, adding and deleting saved medications."""

    def __init__(self, medication_service: MedicationService) -> None:
        self._medications = medication_service

    async def list_medications(self, user_id: str, page: int, per_page: int) -> MedicationListResponse:
        """Handle GET /v1/user/drugs requests.

        Raises:
            HTTPException: 424 if a saved drug cannot be resolved
        """
        try:
            enriched = await self._medications.list_medications(user_id, page=page, per_page=per_page)
        except DrugLookupError as e:
            raise to_http_exception(e) from e
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

        return MedicationListResponse.from_page(enriched)

    async def add_medication(self, user_id: str, request: AddMedicationRequest) -> SavedMedicationResponse:
        """Handle POST /v1/user/drugs requests.

        Raises:
            HTTPException: 422 if the drug is invalid or already saved
        """
        try:
            medication = await self._medications.add_medication(user_id, request.rxcui)
        except DrugLookupError as e:
            raise to_http_exception(e) from e

        return SavedMedicationResponse.from_entity(medication)

    async def delete_medication(self, user_id: str, identifier: str) -> None:
        """Handle DELETE /v1/user/drugs/{identifier} requests.

        Raises:
            HTTPException: 422 if the drug is invalid, 404 if it is not saved
        """
        try:
            await self._medications.delete_medication(user_id, identifier)
        except DrugLookupError as e:
            raise to_http_exception(e) from e
