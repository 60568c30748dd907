"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
Internal domain logic should use entities from the entities package.
"""

from .requests import AddMedicationRequest
from .responses import (
    DrugItem,
    DrugSearchResponse,
    HealthCheckResponse,
    MedicationListResponse,
    SavedMedicationResponse,
)

__all__ = [
    "AddMedicationRequest",
    "DrugItem",
    "DrugSearchResponse",
    "HealthCheckResponse",
    "MedicationListResponse",
    "SavedMedicationResponse",
]
