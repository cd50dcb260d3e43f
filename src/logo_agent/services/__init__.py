"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> LogoAgentService -> LogoCacheService -> IndexStore
    (HTTP)  -> (Orchestration)  -> (Cache policy)   -> (Data Access)

Usage:
    ```python
    from logo_agent.services import LogoAgentService

    # Using factory method (recommended)
    agent = LogoAgentService.create()

    # Or manual creation
    agent = LogoAgentService(
        resolver=BrandResolver(),
        source_resolver=SourceResolver(),
        fetcher=HttpLogoFetcher(),
        evaluator=QualityEvaluator(),
        cache=LogoCacheService(index_store=JsonIndexRepository()),
    )
    ```
"""

from .cache_service import LogoCacheService
from .heuristic_scorer import HeuristicQualityScorer
from .identity_resolver import BrandResolver, canonicalize_brand_name, normalize_brand_name
from .logo_agent_service import LogoAgentService, RetryPolicy
from .quality_evaluator import QualityEvaluator
from .source_resolver import SourceResolver, build_logo_search_url

__all__ = [
    "BrandResolver",
    "HeuristicQualityScorer",
    "LogoAgentService",
    "LogoCacheService",
    "QualityEvaluator",
    "RetryPolicy",
    "SourceResolver",
    "build_logo_search_url",
    "canonicalize_brand_name",
    "normalize_brand_name",
]
