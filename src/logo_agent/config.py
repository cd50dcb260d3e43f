import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_dir: str = os.getenv("LOGO_CACHE_DIR", os.path.join("public", "logos"))
    index_path: str = os.getenv("LOGO_INDEX_PATH", ".smart-logo-cache.json")
    public_url_prefix: str = os.getenv("LOGO_PUBLIC_URL_PREFIX", "/logos")
    cache_max_size: int = int(os.getenv("LOGO_CACHE_MAX_SIZE", str(50 * 1024 * 1024)))  # 50 MiB
    cache_ttl: int = int(os.getenv("LOGO_CACHE_TTL", str(30 * 24 * 60 * 60)))  # 30 days default

    # Index backend: "json" (file next to the cache) or "redis"
    index_backend: str = os.getenv("INDEX_BACKEND", "json").lower()

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    redis_key_prefix: str = os.getenv("REDIS_KEY_PREFIX", "logo_agent")

    # Fetching
    source_timeout: float = float(os.getenv("FETCH_SOURCE_TIMEOUT", "7.5"))
    user_agent: str = os.getenv("FETCH_USER_AGENT", "logo-agent/0.1 (+brand logo fetcher)")
    max_connections: int = int(os.getenv("FETCH_MAX_CONNECTIONS", "20"))
    max_retries: int = int(os.getenv("FETCH_MAX_RETRIES", "2"))
    retry_base_delay: float = float(os.getenv("FETCH_RETRY_BASE_DELAY", "1.0"))

    # Evaluation
    quality_threshold: float = float(os.getenv("QUALITY_THRESHOLD", "0.3"))

    # Brands
    preload_brands: tuple[str, ...] = _split_csv(
        os.getenv("PRELOAD_BRANDS", "mcdonalds,starbucks,luckin")
    )
    preload_on_startup: bool = os.getenv("PRELOAD_ON_STARTUP", "false").lower() == "true"
    brand_sources_path: str | None = os.getenv("BRAND_SOURCES_PATH")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def uses_redis_index(self) -> bool:
        """Check if the cache index is kept in Redis instead of a JSON file.

        Returns:
            True if INDEX_BACKEND is "redis", False otherwise
        """
        return self.index_backend == "redis"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_max_size <= 0:
            raise ValueError("LOGO_CACHE_MAX_SIZE must be a positive number of bytes")

        if self.cache_ttl <= 0:
            raise ValueError("LOGO_CACHE_TTL must be a positive number of seconds")

        if self.source_timeout <= 0:
            raise ValueError("FETCH_SOURCE_TIMEOUT must be greater than 0")

        if self.max_retries < 0:
            raise ValueError("FETCH_MAX_RETRIES cannot be negative")

        if not 0 <= self.quality_threshold <= 1:
            raise ValueError("QUALITY_THRESHOLD must be between 0 and 1")

        if self.index_backend not in ("json", "redis"):
            raise ValueError(
                f"INDEX_BACKEND must be one of ['json', 'redis'], got {self.index_backend}"
            )


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
        decode_responses=False,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the API process and scripts."""
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
