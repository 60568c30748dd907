"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Client / Repository
    (HTTP)  -> (Business) -> (RxNav / Cache / Store)
"""

from .drug_lookup_service import DrugLookupService
from .medication_enricher import MedicationEnricher
from .medication_service import MedicationService

__all__ = [
    "DrugLookupService",
    "MedicationEnricher",
    "MedicationService",
]
