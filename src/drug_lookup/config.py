import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Terminology service (NLM RxNav)
    rxnorm_base_url: str = os.getenv("RXNORM_BASE_URL", "https://rxnav.nlm.nih.gov/REST")
    terminology_timeout: float = float(os.getenv("TERMINOLOGY_TIMEOUT", "8.0"))
    branded_drug_tty: str = os.getenv("BRANDED_DRUG_TTY", "SBD")
    search_result_limit: int = int(os.getenv("SEARCH_RESULT_LIMIT", "5"))
    max_concurrent_lookups: int = int(os.getenv("MAX_CONCURRENT_LOOKUPS", "5"))

    # Cache
    cache_backend: str = os.getenv("CACHE_BACKEND", "memory")  # "memory" or "redis"
    cache_ttl: int = int(os.getenv("CACHE_TTL", "86400"))  # 24 hours default
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "drug_lookup")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    # Rate limiting (requests per window, per client)
    search_rate_limit: int = int(os.getenv("SEARCH_RATE_LIMIT", "30"))
    api_rate_limit: int = int(os.getenv("API_RATE_LIMIT", "60"))
    rate_limit_window: int = int(os.getenv("RATE_LIMIT_WINDOW", "60"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def uses_redis(self) -> bool:
        """Check if the Redis cache backend is configured."""
        return self.cache_backend.lower() == "redis"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_backend.lower() not in ("memory", "redis"):
            raise ValueError(f"CACHE_BACKEND must be 'memory' or 'redis', got {self.cache_backend!r}")

        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if self.terminology_timeout <= 0:
            raise ValueError("TERMINOLOGY_TIMEOUT must be positive")

        if self.search_result_limit < 1:
            raise ValueError("SEARCH_RESULT_LIMIT must be at least 1")

        if self.max_concurrent_lookups < 1:
            raise ValueError("MAX_CONCURRENT_LOOKUPS must be at least 1")

        if min(self.search_rate_limit, self.api_rate_limit, self.rate_limit_window) < 1:
            raise ValueError("SEARCH_RATE_LIMIT, API_RATE_LIMIT and RATE_LIMIT_WINDOW must be at least 1")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service process."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
