"""HTTP handlers for public drug lookups.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes and error responses.
"""

from fastapi import HTTPException, status

from drug_lookup.dto import DrugItem, DrugSearchResponse, HealthCheckResponse
from drug_lookup.errors import DrugLookupError
from drug_lookup.handlers.errors import to_http_exception
from drug_lookup.services import DrugLookupService


class DrugHandler:
    """HTTP handlers for drug search and detail lookups.

    Example:
        ```python
        handler = DrugHandler(lookup_service=service)

        @app.get("/v1/drugs/search", response_model=DrugSearchResponse)
        async def search(drug_name: str):
            return await handler.search(drug_name)
        ```
    """

    def __init__(self, lookup_service: DrugLookupService) -> None:
        """Initialize the drug handler.

        Args:
            lookup_service: The lookup service for business logic (required).
        """
        self._lookup = lookup_service

    async def search(self, drug_name: str) -> DrugSearchResponse:
        """Handle GET /v1/drugs/search requests.

        Raises:
            HTTPException: 502 if RxNav is unavailable, 500 on unexpected errors
        """
        try:
            records = await self._lookup.search_by_name(drug_name)
        except DrugLookupError as e:
            raise to_http_exception(e) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to search drugs: {e}",
            ) from e

        return DrugSearchResponse(
            drug_name=drug_name,
            results=[DrugItem.from_entity(record) for record in records],
        )

    async def details(self, identifier: str) -> DrugItem:
        """Handle GET /v1/drugs/{identifier} requests.

        Raises:
            HTTPException: 404 if the drug has no details, 500 on unexpected errors
        """
        try:
            record = await self._lookup.get_details(identifier)
        except DrugLookupError as e:
            raise to_http_exception(e) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get drug details: {e}",
            ) from e

        return DrugItem.from_entity(record)

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        is_healthy = self._lookup.cache.health_check()
        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=is_healthy,
        )
