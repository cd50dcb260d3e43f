"""Cache entry domain entity."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for one cached brand logo.

    This is an internal representation used by services and repositories.
    Mutations (touch on access) produce a new instance.

    Attributes:
        brand: Cache key, one entry per brand
        version: Version tag ("custom" for uploads)
        url: Origin URL of the cached image
        local_path: Image file inside the cache directory
        size: File size in bytes
        cached_at: When the entry was written (UTC)
        expires_at: cached_at + TTL (UTC)
        access_count: Number of cache hits served
        last_accessed: Time of the latest hit, or cached_at (UTC)
        quality_score: Overall quality score at capture time
    """

    brand: str
    version: str
    url: str
    local_path: Path
    size: int
    cached_at: datetime
    expires_at: datetime
    access_count: int = 0
    last_accessed: datetime | None = None
    quality_score: float = 0.0

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def touched(self, now: datetime) -> "CacheEntryEntity":
        """Return a copy recording one more access at ``now``."""
        return replace(self, access_count=self.access_count + 1, last_accessed=now)

    @property
    def eviction_key(self) -> tuple[int, datetime]:
        """Sort key where larger means more valuable to keep."""
        return (self.access_count, self.last_accessed or self.cached_at)


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of the cache contents."""

    total_size: int
    total_count: int
    max_size: int
    entries: list[CacheEntryEntity] = field(default_factory=list)

    @property
    def usage_ratio(self) -> float:
        if self.max_size <= 0:
            return 0.0
        return self.total_size / self.max_size
