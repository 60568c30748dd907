"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class AddMedicationRequest(BaseModel):
    """Request DTO for saving a drug on the caller's list."""

    rxcui: str = Field(..., description="RxCUI of the drug to save", min_length=1)
