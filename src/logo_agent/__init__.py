"""Logo Agent - Brand logo acquisition with a bounded local cache.

This package provides a layered architecture for acquiring brand logos:

Layers:
    - protocols: Interface contracts (IndexStore, CandidateFetcher, QualityScorer)
    - repositories: Data access implementations (JSON/Redis index, HTTP fetcher)
    - services: Business logic (resolution, evaluation, cache policy, orchestration)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from logo_agent.services import LogoAgentService

    # Using class method (recommended, like Path.home())
    agent = LogoAgentService.create()
    ref = await agent.acquire("starbucks")
    ```

For HTTP API:
    ```python
    from logo_agent.api.app import app
    ```
"""

from logo_agent.config import get_redis_client, settings
from logo_agent.dto import BatchLogoRequest, LogoRequest
from logo_agent.entities import (
    BrandIdentity,
    CacheEntryEntity,
    FetchCandidate,
    LogoReference,
    QualityScore,
)
from logo_agent.errors import (
    AllSourcesFailed,
    BrandUnrecognized,
    CacheIOError,
    EmptyCandidateSet,
    LogoAgentError,
    NoSources,
    SourceFetchFailed,
)
from logo_agent.handlers import LogoHandler
from logo_agent.protocols import CandidateFetcher, IndexStore, QualityScorer
from logo_agent.repositories import HttpLogoFetcher, JsonIndexRepository, RedisIndexRepository
from logo_agent.services import (
    BrandResolver,
    LogoAgentService,
    LogoCacheService,
    QualityEvaluator,
    RetryPolicy,
    SourceResolver,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CandidateFetcher",
    "IndexStore",
    "QualityScorer",
    # Services (business logic)
    "BrandResolver",
    "SourceResolver",
    "QualityEvaluator",
    "LogoCacheService",
    "LogoAgentService",
    "RetryPolicy",
    # Handlers (HTTP)
    "LogoHandler",
    # Repositories (data access)
    "HttpLogoFetcher",
    "JsonIndexRepository",
    "RedisIndexRepository",
    # Entities (domain models)
    "BrandIdentity",
    "CacheEntryEntity",
    "FetchCandidate",
    "LogoReference",
    "QualityScore",
    # Errors
    "LogoAgentError",
    "BrandUnrecognized",
    "NoSources",
    "SourceFetchFailed",
    "AllSourcesFailed",
    "CacheIOError",
    "EmptyCandidateSet",
    # DTOs (API contracts)
    "LogoRequest",
    "BatchLogoRequest",
]
