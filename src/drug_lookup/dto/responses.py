"""Response DTOs for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from drug_lookup.entities import DrugRecord, MedicationPage, UserMedication


class DrugItem(BaseModel):
    """A single normalized drug record."""

    model_config = ConfigDict(populate_by_name=True)

    rxcui: str = Field(..., description="RxCUI of the drug concept")
    name: str = Field(..., description="Canonical display name")
    base_names: list[str] = Field(
        default_factory=list,
        alias="baseNames",
        description="Ingredient base names, deduplicated",
    )
    dose_forms: list[str] = Field(
        default_factory=list,
        alias="doseForms",
        description="Dose form group names, deduplicated",
    )

    @classmethod
    def from_entity(cls, record: DrugRecord) -> "DrugItem":
        return cls.model_validate(record.to_dict())


class DrugSearchResponse(BaseModel):
    """Response DTO for drug search."""

    drug_name: str = Field(..., description="The name that was searched")
    results: list[DrugItem] = Field(
        default_factory=list,
        description="Matching drugs in upstream relevance order",
    )


class MedicationListResponse(BaseModel):
    """Response DTO for one page of the caller's medication list."""

    data: list[DrugItem] = Field(default_factory=list)
    current_page: int = Field(..., ge=1)
    per_page: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    last_page: int = Field(..., ge=1)

    @classmethod
    def from_page(cls, page: MedicationPage[DrugRecord]) -> "MedicationListResponse":
        return cls(
            data=[DrugItem.from_entity(record) for record in page.items],
            current_page=page.current_page,
            per_page=page.per_page,
            total=page.total,
            last_page=page.last_page,
        )


class SavedMedicationResponse(BaseModel):
    """Response DTO for a newly saved medication."""

    rxcui: str
    created_at: datetime

    @classmethod
    def from_entity(cls, medication: UserMedication) -> "SavedMedicationResponse":
        return cls(rxcui=medication.identifier, created_at=medication.created_at)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
