"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services built once during lifespan and stored in app.state
    - Dependency functions retrieve from request.app.state
    - The cache is an explicit handle passed to the lookup service,
      never a module-level singleton
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status

from drug_lookup.api.rate_limit import RateLimiter
from drug_lookup.clients import TerminologyClient
from drug_lookup.config import configure_logging, settings
from drug_lookup.handlers import DrugHandler, MedicationHandler
from drug_lookup.protocols import CacheStore, UserMedicationStore
from drug_lookup.repositories import (
    InMemoryCacheRepository,
    InMemoryMedicationStore,
    RedisCacheRepository,
)
from drug_lookup.services import DrugLookupService, MedicationEnricher, MedicationService

logger = logging.getLogger(__name__)

STATE_ATTRIBUTES = (
    "drug_handler",
    "medication_handler",
    "medication_service",
    "lookup_service",
    "cache",
    "terminology_client",
    "search_limiter",
    "api_limiter",
)


def get_drug_handler(request: Request) -> DrugHandler:
    """Dependency injection for DrugHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "drug_handler", None)
    if handler is None:
        raise RuntimeError("DrugHandler not initialized. Check lifespan setup.")
    return handler


def get_medication_handler(request: Request) -> MedicationHandler:
    """Dependency injection for MedicationHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "medication_handler", None)
    if handler is None:
        raise RuntimeError("MedicationHandler not initialized. Check lifespan setup.")
    return handler


def get_current_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """Caller identity, as established by the auth layer in front of this service."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthenticated",
        )
    return x_user_id


def _enforce_limit(request: Request, limiter_name: str, client_id: str) -> None:
    limiter: RateLimiter | None = getattr(request.app.state, limiter_name, None)
    if limiter is None:
        raise RuntimeError(f"{limiter_name} not initialized. Check lifespan setup.")
    if not limiter.is_allowed(client_id):
        logger.warning("Rate limit exceeded on %s for client=%s", request.url.path, client_id)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests",
            headers={"Retry-After": str(limiter.retry_after(client_id))},
        )


def limit_search_requests(request: Request) -> None:
    """Throttle the public search route per client address."""
    client_id = request.client.host if request.client else "unknown"
    _enforce_limit(request, "search_limiter", client_id)


def get_rate_limited_user_id(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> str:
    """Caller identity, throttled per user across the user routes."""
    _enforce_limit(request, "api_limiter", user_id)
    return user_id


def create_cache() -> CacheStore:
    """Build the configured cache backend."""
    if settings.uses_redis:
        return RedisCacheRepository.create()
    return InMemoryCacheRepository.create()


def wire_services(
    app: FastAPI,
    terminology_client: TerminologyClient,
    cache: CacheStore,
    medication_store: UserMedicationStore,
    search_limiter: RateLimiter | None = None,
    api_limiter: RateLimiter | None = None,
) -> None:
    """Build every layer from explicit dependencies and store it in app.state.

    Limiters default to the configured per-window limits.
    """
    lookup_service = DrugLookupService.create(terminology_client=terminology_client, cache=cache)
    enricher = MedicationEnricher(lookup_service=lookup_service)
    medication_service = MedicationService(
        store=medication_store,
        terminology_client=terminology_client,
        enricher=enricher,
    )

    app.state.terminology_client = terminology_client
    app.state.cache = cache
    app.state.lookup_service = lookup_service
    app.state.medication_service = medication_service
    app.state.drug_handler = DrugHandler(lookup_service=lookup_service)
    app.state.medication_handler = MedicationHandler(medication_service=medication_service)
    app.state.search_limiter = search_limiter or RateLimiter.for_search()
    app.state.api_limiter = api_limiter or RateLimiter.for_user_routes()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores them in app.state:
    1. Terminology client and cache (explicit handles)
    2. Lookup, enrichment and medication services
    3. HTTP handlers and rate limiters

    Cleanup:
        Closes the HTTP client and removes everything from app.state
    """
    configure_logging()

    terminology_client = TerminologyClient.create()
    cache = create_cache()
    wire_services(app, terminology_client, cache, InMemoryMedicationStore())

    logger.info("Drug lookup service initialized")
    logger.info("RxNav base URL: %s", settings.rxnorm_base_url)
    logger.info("Cache backend: %s (ttl=%ss, healthy=%s)", settings.cache_backend, settings.cache_ttl, cache.health_check())
    logger.info("Rate limits: search=%s, user=%s per %ss", settings.search_rate_limit, settings.api_rate_limit, settings.rate_limit_window)

    yield

    await terminology_client.close()
    for name in STATE_ATTRIBUTES:
        delattr(app.state, name)
    logger.info("Drug lookup service shut down")


# Type aliases for cleaner dependency injection
DrugHandlerDep = Annotated[DrugHandler, Depends(get_drug_handler)]
MedicationHandlerDep = Annotated[MedicationHandler, Depends(get_medication_handler)]
UserIdDep = Annotated[str, Depends(get_rate_limited_user_id)]
