"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (JSON file → Redis, heuristic → decoding scorer, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from logo_agent.protocols import IndexStore, QualityScorer

    # Type hints work with any implementation
    index: IndexStore = JsonIndexRepository(path)   # works
    index: IndexStore = RedisIndexRepository()      # also works
    ```
"""

from .candidate_fetcher import CandidateFetcher
from .index_store import IndexStore
from .quality_scorer import QualityScorer

__all__ = [
    "CandidateFetcher",
    "IndexStore",
    "QualityScorer",
]
