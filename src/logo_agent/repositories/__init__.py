"""Repository layer for data access.

This layer abstracts external dependencies (filesystem, Redis, HTTP sources)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations (JSON file → Redis, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from logo_agent.protocols import CandidateFetcher, IndexStore

from .http_logo_fetcher import HttpLogoFetcher
from .json_index_repository import JsonIndexRepository
from .redis_index_repository import RedisIndexRepository

__all__ = [
    "CandidateFetcher",
    "IndexStore",
    "HttpLogoFetcher",
    "JsonIndexRepository",
    "RedisIndexRepository",
]
