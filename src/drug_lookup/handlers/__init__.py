"""Handler layer for HTTP endpoints.

Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Client / Repository
    (HTTP)  -> (Business) -> (RxNav / Cache / Store)
"""

from .drug_handler import DrugHandler
from .medication_handler import MedicationHandler

__all__ = [
    "DrugHandler",
    "MedicationHandler",
]
