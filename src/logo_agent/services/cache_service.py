"""Logo cache service.

Owns the cache directory and the cache index: one entry per brand, each
pointing at an image file in the directory. Every index mutation (touch on
hit, put, evict, clear) is a whole-index read-modify-write done under a
single in-process lock; the index store persists atomically.

Entry lifecycle: absent -> cached -> (expired | evicted | cleared) -> absent.
"""

import logging
import os
import threading
import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from uuid import uuid4

from logo_agent.config import settings
from logo_agent.entities import CacheEntryEntity, CacheStats, LogoReference
from logo_agent.errors import CacheIOError
from logo_agent.protocols import IndexStore
from logo_agent.utils import file_extension_for

logger = logging.getLogger(__name__)

# Eviction shrinks the cache to this fraction of the maximum size
EVICTION_TARGET_RATIO = 0.8


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LogoCacheService:
    """Capacity-bounded, expiry-aware cache of brand logos.

    This service depends on the IndexStore PROTOCOL, so the index can live in
    a JSON file or in Redis without changing the cache logic.

    Example:
        ```python
        from logo_agent.repositories import JsonIndexRepository
        from logo_agent.services import LogoCacheService

        cache = LogoCacheService.create(index_store=JsonIndexRepository.create())
        ref = cache.put("kfc", "1.0.0", "https://example.com/kfc.png", data, 0.7)
        cache.get("kfc")  # LogoReference(from_cache=True, ...)
        ```
    """

    def __init__(
        self,
        index_store: IndexStore,
        cache_dir: str | Path | None = None,
        max_size: int | None = None,
        ttl: int | None = None,
        public_url_prefix: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            index_store: Index storage backend (required).
            cache_dir: Directory holding the image files. Defaults to settings.
            max_size: Maximum total size in bytes. Defaults to settings.
            ttl: Entry time-to-live in seconds. Defaults to settings.
            public_url_prefix: URL prefix the directory is served under. Defaults to settings.
            clock: Returns the current UTC time (for testing).
        """
        self._index = index_store
        self._cache_dir = Path(cache_dir or settings.cache_dir)
        self._max_size = settings.cache_max_size if max_size is None else max_size
        self._ttl = settings.cache_ttl if ttl is None else ttl
        self._url_prefix = (public_url_prefix or settings.public_url_prefix).rstrip("/")
        self._clock = clock or _utcnow
        self._lock = threading.RLock()
        self.ensure_directory()

    @classmethod
    def create(
        cls,
        index_store: IndexStore,
        cache_dir: str | Path | None = None,
        max_size: int | None = None,
        ttl: int | None = None,
    ) -> "LogoCacheService":
        """Factory method to create LogoCacheService with settings defaults.

        Args:
            index_store: Index storage backend (required).
            cache_dir: Image directory. If None, uses settings.
            max_size: Maximum total bytes. If None, uses settings.
            ttl: Time-to-live in seconds. If None, uses settings.

        Returns:
            Configured LogoCacheService
        """
        return cls(index_store=index_store, cache_dir=cache_dir, max_size=max_size, ttl=ttl)

    def ensure_directory(self) -> None:
        """Create the cache directory if it does not exist.

        Raises:
            CacheIOError: If the directory cannot be created
        """
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create cache directory %s", self._cache_dir, exc_info=True)
            raise CacheIOError("mkdir", self._cache_dir, str(e)) from e

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, brand: str) -> LogoReference | None:
        """Return the cached logo for a brand, recording the access.

        An entry whose file is missing or which has expired is removed on
        this lookup and reported as a miss.

        Args:
            brand: Cache key

        Returns:
            LogoReference on a hit, None on a miss
        """
        with self._lock:
            entries = self._index.load()
            entry = entries.get(brand)
            if entry is None:
                return None

            now = self._clock()
            if not entry.local_path.exists():
                logger.warning("Cached file for %s is missing: %s", brand, entry.local_path)
                del entries[brand]
                self._index.save(entries)
                return None

            if entry.is_expired(now):
                logger.info("Cache entry for %s expired at %s", brand, entry.expires_at.isoformat())
                del entries[brand]
                self._index.save(entries)
                self._remove_file(entry.local_path)
                return None

            touched = entry.touched(now)
            entries[brand] = touched
            self._index.save(entries)

        logger.debug("Cache hit for %s (access #%d)", brand, touched.access_count)
        return self._reference(touched, from_cache=True)

    def get_entry(self, brand: str) -> CacheEntryEntity | None:
        """Return the raw index entry without touching it."""
        with self._lock:
            return self._index.load().get(brand)

    def is_valid(self, brand: str, version: str | None = None) -> bool:
        """Check whether a usable entry exists, without recording an access.

        Args:
            brand: Cache key
            version: If given, the entry's version tag must match

        Returns:
            True if the entry exists, matches, has its file and is not expired
        """
        entry = self.get_entry(brand)
        if entry is None:
            return False
        if version is not None and entry.version != version:
            return False
        if not entry.local_path.exists():
            return False
        return not entry.is_expired(self._clock())

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def put(
        self,
        brand: str,
        version: str,
        url: str,
        data: bytes,
        quality_score: float = 0.8,
    ) -> LogoReference:
        """Store a logo as the brand's single cache entry.

        The previous file of the brand, if any, is deleted. Eviction runs
        afterwards; the entry just written is exempt from that pass.

        Args:
            brand: Cache key
            version: Version tag
            url: Origin URL of the image
            data: Image bytes
            quality_score: Overall quality score of the image

        Returns:
            LogoReference to the stored file

        Raises:
            CacheIOError: If the file or the index cannot be written
        """
        local_path = self._write_file(brand, version, data)
        now = self._clock()
        entry = CacheEntryEntity(
            brand=brand,
            version=version,
            url=url,
            local_path=local_path,
            size=len(data),
            cached_at=now,
            expires_at=now + timedelta(seconds=self._ttl),
            access_count=0,
            last_accessed=now,
            quality_score=quality_score,
        )

        with self._lock:
            try:
                entries = self._index.load()
                previous = entries.get(brand)
                entries[brand] = entry
                evicted = self._select_evictions(entries, protect=brand)
                for victim in evicted:
                    del entries[victim.brand]
                self._index.save(entries)
            except CacheIOError:
                self._remove_file(local_path, strict=False)
                raise

            if previous is not None and previous.local_path != local_path:
                self._remove_file(previous.local_path)
            self._remove_evicted(evicted)

        logger.info("Cached logo for %s (%d bytes, version %s) at %s", brand, len(data), version, local_path)
        return self._reference(entry, from_cache=False)

    def evict(self) -> list[str]:
        """Shrink the cache when it exceeds its maximum size.

        Entries are ranked by access count, then last access time; the least
        used and least recent go first until the total size is at most 80%
        of the maximum. Does nothing when the cache is within its limit.

        Returns:
            Brands that were evicted
        """
        with self._lock:
            entries = self._index.load()
            evicted = self._select_evictions(entries)
            if not evicted:
                return []
            for victim in evicted:
                del entries[victim.brand]
            self._index.save(entries)
            self._remove_evicted(evicted)
        return [victim.brand for victim in evicted]

    def _select_evictions(
        self,
        entries: dict[str, CacheEntryEntity],
        protect: str | None = None,
    ) -> list[CacheEntryEntity]:
        total = sum(entry.size for entry in entries.values())
        if total <= self._max_size:
            return []

        target = self._max_size * EVICTION_TARGET_RATIO
        # Most valuable first; walk from the least valuable end
        ranked = sorted(entries.values(), key=lambda entry: entry.eviction_key, reverse=True)
        evicted = []
        for entry in reversed(ranked):
            if total <= target:
                break
            if entry.brand == protect:
                continue
            evicted.append(entry)
            total -= entry.size
        return evicted

    def _remove_evicted(self, evicted: list[CacheEntryEntity]) -> None:
        for victim in evicted:
            self._remove_file(victim.local_path)
        if evicted:
            logger.info(
                "Evicted %d cache entries: %s",
                len(evicted),
                ", ".join(victim.brand for victim in evicted),
            )

    def clear(self, brand: str) -> bool:
        """Remove one brand's entry and file.

        Returns:
            True if an entry was removed, False if none existed
        """
        with self._lock:
            entries = self._index.load()
            entry = entries.pop(brand, None)
            if entry is None:
                return False
            self._index.save(entries)
            self._remove_file(entry.local_path)
        logger.info("Cleared cache for %s", brand)
        return True

    def clear_all(self) -> int:
        """Remove every entry and file.

        Returns:
            Number of entries removed
        """
        with self._lock:
            entries = self._index.load()
            self._index.save({})
            for entry in entries.values():
                self._remove_file(entry.local_path)
        logger.info("Cleared all %d cache entries", len(entries))
        return len(entries)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def stats(self) -> CacheStats:
        """Get cache statistics.

        Returns:
            CacheStats with total size, count, maximum size and entries
        """
        with self._lock:
            entries = list(self._index.load().values())
        return CacheStats(
            total_size=sum(entry.size for entry in entries),
            total_count=len(entries),
            max_size=self._max_size,
            entries=entries,
        )

    def health_check(self) -> bool:
        """Check that the directory is writable and the index backend is reachable."""
        directory_ok = self._cache_dir.is_dir() and os.access(self._cache_dir, os.W_OK)
        return directory_ok and self._index.health_check()

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def _write_file(self, brand: str, version: str, data: bytes) -> Path:
        file_name = (
            f"{brand}-{version}-{int(time.time() * 1000)}-{uuid4().hex[:8]}"
            f"{file_extension_for(data)}"
        )
        path = self._cache_dir / file_name
        tmp_path = path.with_name(f".{path.stem}.tmp.{uuid4().hex}")
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            tmp_path.rename(path)
        except OSError as e:
            logger.error("Disk error writing cached logo to %s", path, exc_info=True)
            tmp_path.unlink(missing_ok=True)
            raise CacheIOError("write", path, str(e)) from e
        return path

    def _remove_file(self, path: Path, strict: bool = True) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to delete cached file %s", path, exc_info=True)
            if strict:
                raise CacheIOError("delete", path, str(e)) from e

    def _reference(self, entry: CacheEntryEntity, from_cache: bool) -> LogoReference:
        return LogoReference(
            brand=entry.brand,
            url=f"{self._url_prefix}/{entry.local_path.name}",
            local_path=entry.local_path,
            version=entry.version,
            source=entry.url,
            quality_score=entry.quality_score,
            from_cache=from_cache,
        )

    @property
    def cache_dir(self) -> Path:
        """Get the cache directory."""
        return self._cache_dir

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def ttl(self) -> int:
        return self._ttl

    @property
    def index_store(self) -> IndexStore:
        """Get the underlying index store (for testing)."""
        return self._index
