"""Repository layer for data access.

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from drug_lookup.protocols import CacheStore, UserMedicationStore

from .medication_store import InMemoryMedicationStore
from .memory_repository import InMemoryCacheRepository
from .redis_repository import RedisCacheRepository

__all__ = [
    "CacheStore",
    "UserMedicationStore",
    "InMemoryCacheRepository",
    "InMemoryMedicationStore",
    "RedisCacheRepository",
]
