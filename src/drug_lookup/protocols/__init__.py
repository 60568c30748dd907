"""Protocol interfaces for swappable implementations.

Protocols use structural typing, so services can be tested with
in-memory fakes and deployed with Redis or a database.
"""

from .cache_store import CacheStore
from .medication_store import UserMedicationStore

__all__ = [
    "CacheStore",
    "UserMedicationStore",
]
