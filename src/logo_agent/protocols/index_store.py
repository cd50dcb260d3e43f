"""Cache index storage protocol.

Defines the interface for any backend that persists the cache index: one
record per brand describing the cached file, its expiry and access stats.

The cache service always performs a whole-index read-modify-write under its
own lock, so implementations only need atomic ``load`` and ``save``.

Implementations can include:
- JSON file with atomic replace (default)
- Redis hash
- Any embedded key-value store
"""

from typing import Protocol, runtime_checkable

from logo_agent.entities import CacheEntryEntity


@runtime_checkable
class IndexStore(Protocol):
    """Protocol for cache index backends.

    Example:
        ```python
        from logo_agent.protocols import IndexStore

        store: IndexStore = JsonIndexRepository(".smart-logo-cache.json")
        entries = store.load()
        store.save(entries)
        ```
    """

    def load(self) -> dict[str, CacheEntryEntity]:
        """Load the whole index.

        Returns:
            Mapping of brand key to entry (empty when nothing is stored)

        Raises:
            CacheIOError: If the index exists but cannot be read
        """
        ...

    def save(self, entries: dict[str, CacheEntryEntity]) -> None:
        """Replace the whole index atomically.

        Args:
            entries: Mapping of brand key to entry

        Raises:
            CacheIOError: If the index cannot be written
        """
        ...

    def health_check(self) -> bool:
        """Check if the backend is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
