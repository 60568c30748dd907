"""Drug Lookup - RxNorm drug search and medication lists with a lookaside cache.

Layers:
    - clients: RxNav HTTP client (all upstream JSON parsing)
    - protocols: Interface contracts (CacheStore, UserMedicationStore)
    - repositories: Cache and store implementations
    - services: Business logic (lookup, enrichment, medication list)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from drug_lookup import DrugLookupService, InMemoryCacheRepository, TerminologyClient

    service = DrugLookupService.create(
        terminology_client=TerminologyClient.create(),
        cache=InMemoryCacheRepository.create(),
    )
    records = await service.search_by_name("lipitor")
    ```

For HTTP API:
    ```python
    from drug_lookup.api.app import app
    ```
"""

from drug_lookup.clients import TerminologyClient
from drug_lookup.config import get_redis_client, settings
from drug_lookup.entities import CacheEntry, DrugRecord, MedicationPage, UserMedication
from drug_lookup.errors import (
    DetailUnavailable,
    DrugLookupError,
    InvalidIdentifier,
    MedicationAlreadyExists,
    MedicationNotFound,
    NotFound,
    UpstreamUnavailable,
)
from drug_lookup.handlers import DrugHandler, MedicationHandler
from drug_lookup.protocols import CacheStore, UserMedicationStore
from drug_lookup.repositories import (
    InMemoryCacheRepository,
    InMemoryMedicationStore,
    RedisCacheRepository,
)
from drug_lookup.services import DrugLookupService, MedicationEnricher, MedicationService

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CacheStore",
    "UserMedicationStore",
    # Clients
    "TerminologyClient",
    # Services (business logic)
    "DrugLookupService",
    "MedicationEnricher",
    "MedicationService",
    # Handlers (HTTP)
    "DrugHandler",
    "MedicationHandler",
    # Repositories (data access)
    "InMemoryCacheRepository",
    "InMemoryMedicationStore",
    "RedisCacheRepository",
    # Entities (domain models)
    "CacheEntry",
    "DrugRecord",
    "MedicationPage",
    "UserMedication",
    # Errors
    "DrugLookupError",
    "UpstreamUnavailable",
    "NotFound",
    "DetailUnavailable",
    "InvalidIdentifier",
    "MedicationAlreadyExists",
    "MedicationNotFound",
]
