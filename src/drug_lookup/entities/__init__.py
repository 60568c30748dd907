"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntry
from .drug_record import DrugRecord
from .medication import MedicationPage, UserMedication

__all__ = ["CacheEntry", "DrugRecord", "MedicationPage", "UserMedication"]
