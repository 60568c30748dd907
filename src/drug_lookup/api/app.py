from typing import Annotated, Any

from fastapi import Depends, FastAPI, Query, Response, status
from fastapi.middleware.cors import CORSMiddleware

from drug_lookup.api.dependencies import (
    DrugHandlerDep,
    MedicationHandlerDep,
    UserIdDep,
    lifespan,
    limit_search_requests,
)
from drug_lookup.config import settings
from drug_lookup.dto import (
    AddMedicationRequest,
    DrugItem,
    DrugSearchResponse,
    HealthCheckResponse,
    MedicationListResponse,
    SavedMedicationResponse,
)
from drug_lookup.services.medication_service import MAX_PER_PAGE

app = FastAPI(
    title="Drug Lookup API",
    description="Drug search and medication lists backed by RxNorm with a lookaside cache",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Drug Lookup API",
        "version": "0.1.0",
        "endpoints": {
            "search": "/v1/drugs/search",
            "details": "/v1/drugs/{rxcui}",
            "user_drugs": "/v1/user/drugs",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: DrugHandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.get(
    "/v1/drugs/search",
    response_model=DrugSearchResponse,
    dependencies=[Depends(limit_search_requests)],
)
async def search_drugs(
    handler: DrugHandlerDep,
    drug_name: Annotated[str, Query(min_length=3, description="Drug name to search for")],
) -> DrugSearchResponse:
    """Search drugs by name (branded drugs, top 5)."""
    return await handler.search(drug_name)


@app.get("/v1/drugs/{rxcui}", response_model=DrugItem)
async def get_drug(handler: DrugHandlerDep, rxcui: str) -> DrugItem:
    """Get details for a single drug."""
    return await handler.details(rxcui)


@app.get("/v1/user/drugs", response_model=MedicationListResponse)
async def list_user_drugs(
    handler: MedicationHandlerDep,
    user_id: UserIdDep,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=MAX_PER_PAGE)] = 10,
) -> MedicationListResponse:
    """List the caller's saved drugs with their details."""
    return await handler.list_medications(user_id, page=page, per_page=per_page)


@app.post(
    "/v1/user/drugs",
    response_model=SavedMedicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_user_drug(
    handler: MedicationHandlerDep,
    user_id: UserIdDep,
    request: AddMedicationRequest,
) -> SavedMedicationResponse:
    """Save a drug on the caller's list."""
    return await handler.add_medication(user_id, request)


@app.delete("/v1/user/drugs/{rxcui}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_drug(
    handler: MedicationHandlerDep,
    user_id: UserIdDep,
    rxcui: str,
) -> Response:
    """Remove a drug from the caller's list."""
    await handler.delete_medication(user_id, rxcui)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "drug_lookup.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
