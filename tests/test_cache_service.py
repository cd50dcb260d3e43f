"""
Tests for the logo cache service.
"""

from datetime import timedelta

import pytest

from logo_agent.entities import CacheEntryEntity
from logo_agent.errors import CacheIOError
from logo_agent.repositories import JsonIndexRepository
from logo_agent.services import LogoCacheService


def seed_entry(cache: LogoCacheService, brand: str, size: int, at, access_count: int = 0) -> CacheEntryEntity:
    """Write a file of ``size`` bytes and return a matching entry."""
    path = cache.cache_dir / f"{brand}.png"
    path.write_bytes(b"x" * size)
    return CacheEntryEntity(
        brand=brand,
        version="1.0.0",
        url=f"https://example.com/{brand}.png",
        local_path=path,
        size=size,
        cached_at=at,
        expires_at=at + timedelta(seconds=cache.ttl),
        access_count=access_count,
        last_accessed=at,
        quality_score=0.5,
    )


def test_get_after_put(cache, make_png):
    data = make_png(4096)

    stored = cache.put("kfc", "1.0.0", "https://example.com/kfc.png", data, 0.7)
    hit = cache.get("kfc")

    assert stored.from_cache is False
    assert hit is not None
    assert hit.from_cache is True
    assert hit.local_path == stored.local_path
    assert hit.local_path.read_bytes() == data
    assert hit.url == f"/logos/{stored.local_path.name}"
    assert hit.version == "1.0.0"
    assert hit.source == "https://example.com/kfc.png"
    assert hit.quality_score == 0.7


def test_file_name_pattern(cache, make_png):
    ref = cache.put("kfc", "1.0.0", "https://example.com/kfc.png", make_png(2048))

    name = ref.local_path.name
    assert name.startswith("kfc-1.0.0-")
    assert name.endswith(".png")
    assert ref.local_path.parent == cache.cache_dir
    # No temporary files left behind
    assert [p.name for p in cache.cache_dir.iterdir()] == [name]


def test_get_miss(cache):
    assert cache.get("nothing") is None


def test_get_records_access(cache, clock, make_png):
    cache.put("kfc", "1.0.0", "u", make_png(2048))
    clock.advance(minutes=5)

    cache.get("kfc")
    cache.get("kfc")

    entry = cache.get_entry("kfc")
    assert entry.access_count == 2
    assert entry.last_accessed == clock.now


def test_expired_entry_is_removed_on_get(cache, clock, make_png):
    ref = cache.put("kfc", "1.0.0", "u", make_png(2048))

    clock.advance(seconds=cache.ttl)

    assert cache.get("kfc") is None
    assert cache.get_entry("kfc") is None
    assert not ref.local_path.exists()


def test_entry_just_before_expiry_is_served(cache, clock, make_png):
    cache.put("kfc", "1.0.0", "u", make_png(2048))

    clock.advance(seconds=cache.ttl - 1)

    assert cache.get("kfc") is not None


def test_missing_file_is_removed_on_get(cache, make_png):
    ref = cache.put("kfc", "1.0.0", "u", make_png(2048))
    ref.local_path.unlink()

    assert cache.get("kfc") is None
    assert cache.get_entry("kfc") is None


def test_is_valid(cache, clock, make_png):
    cache.put("kfc", "1.0.0", "u", make_png(2048))

    assert cache.is_valid("kfc")
    assert cache.is_valid("kfc", "1.0.0")
    assert not cache.is_valid("kfc", "2.0.0")
    assert not cache.is_valid("starbucks")
    # is_valid does not count as an access
    assert cache.get_entry("kfc").access_count == 0

    clock.advance(seconds=cache.ttl)
    assert not cache.is_valid("kfc")


def test_put_replaces_previous_file(cache, make_png):
    first = cache.put("kfc", "1.0.0", "u1", make_png(2048))
    second = cache.put("kfc", "1.0.1", "u2", make_png(4096))

    assert not first.local_path.exists()
    assert second.local_path.exists()

    stats = cache.stats()
    assert stats.total_count == 1
    assert stats.total_size == 4096
    assert cache.get_entry("kfc").version == "1.0.1"


def test_evict_removes_least_recent_first(tmp_path, clock):
    """Three equal entries of size 4 against a limit of 10 leave B and C."""
    cache = LogoCacheService(
        index_store=JsonIndexRepository(tmp_path / "index.json"),
        cache_dir=tmp_path / "logos",
        max_size=10,
        ttl=3600,
        clock=clock,
    )
    entries = {}
    for brand in ("a", "b", "c"):
        entries[brand] = seed_entry(cache, brand, 4, clock.now)
        clock.advance(seconds=1)
    cache.index_store.save(entries)

    evicted = cache.evict()

    assert evicted == ["a"]
    assert sorted(cache.index_store.load()) == ["b", "c"]
    assert cache.stats().total_size == 8
    assert not entries["a"].local_path.exists()
    assert entries["b"].local_path.exists()


def test_evict_prefers_rarely_accessed(tmp_path, clock):
    cache = LogoCacheService(
        index_store=JsonIndexRepository(tmp_path / "index.json"),
        cache_dir=tmp_path / "logos",
        max_size=10,
        ttl=3600,
        clock=clock,
    )
    old_popular = seed_entry(cache, "old", 4, clock.now, access_count=5)
    clock.advance(seconds=1)
    new_unused = seed_entry(cache, "new", 4, clock.now)
    clock.advance(seconds=1)
    other = seed_entry(cache, "other", 4, clock.now, access_count=1)
    cache.index_store.save({"old": old_popular, "new": new_unused, "other": other})

    assert cache.evict() == ["new"]


def test_evict_within_limit_is_noop(cache, make_png):
    cache.put("kfc", "1.0.0", "u", make_png(2048))

    assert cache.evict() == []
    assert cache.stats().total_count == 1


def test_evict_shrinks_to_target_ratio(tmp_path, clock):
    cache = LogoCacheService(
        index_store=JsonIndexRepository(tmp_path / "index.json"),
        cache_dir=tmp_path / "logos",
        max_size=100,
        ttl=3600,
        clock=clock,
    )
    entries = {}
    for i in range(6):
        brand = f"brand{i}"
        entries[brand] = seed_entry(cache, brand, 20, clock.now)
        clock.advance(seconds=1)
    cache.index_store.save(entries)

    evicted = cache.evict()

    assert evicted == ["brand0", "brand1"]
    assert cache.stats().total_size == 80


def test_put_evicts_others_but_keeps_new_entry(tmp_path, clock):
    cache = LogoCacheService(
        index_store=JsonIndexRepository(tmp_path / "index.json"),
        cache_dir=tmp_path / "logos",
        max_size=10,
        ttl=3600,
        clock=clock,
    )
    cache.put("a", "1", "u", b"aaaa")
    clock.advance(seconds=1)
    cache.put("b", "1", "u", b"bbbb")
    clock.advance(seconds=1)
    cache.put("c", "1", "u", b"cccc")

    assert sorted(cache.index_store.load()) == ["b", "c"]


def test_oversized_put_keeps_the_new_entry(tmp_path, clock):
    cache = LogoCacheService(
        index_store=JsonIndexRepository(tmp_path / "index.json"),
        cache_dir=tmp_path / "logos",
        max_size=10,
        ttl=3600,
        clock=clock,
    )
    cache.put("small", "1", "u", b"ss")
    ref = cache.put("huge", "1", "u", b"h" * 20)

    assert list(cache.index_store.load()) == ["huge"]
    assert ref.local_path.exists()


def test_clear(cache, make_png):
    ref = cache.put("kfc", "1.0.0", "u", make_png(2048))

    assert cache.clear("kfc") is True
    assert cache.clear("kfc") is False
    assert not ref.local_path.exists()
    assert cache.get("kfc") is None


def test_clear_all(cache, make_png):
    refs = [cache.put(brand, "1.0.0", "u", make_png(2048)) for brand in ("kfc", "luckin", "starbucks")]

    assert cache.clear_all() == 3
    assert cache.stats().total_count == 0
    assert not any(ref.local_path.exists() for ref in refs)


def test_stats(cache, make_png):
    cache.put("kfc", "1.0.0", "u", make_png(2048))
    cache.put("luckin", "2.0.0", "u", make_png(4096))

    stats = cache.stats()

    assert stats.total_count == 2
    assert stats.total_size == 6144
    assert stats.max_size == 1024 * 1024
    assert stats.usage_ratio == pytest.approx(6144 / (1024 * 1024))
    assert {entry.brand for entry in stats.entries} == {"kfc", "luckin"}


def test_index_survives_restart(tmp_path, clock, make_png):
    index_path = tmp_path / "index.json"
    first = LogoCacheService(JsonIndexRepository(index_path), cache_dir=tmp_path / "logos", clock=clock)
    first.put("kfc", "1.0.0", "u", make_png(2048))

    second = LogoCacheService(JsonIndexRepository(index_path), cache_dir=tmp_path / "logos", clock=clock)

    assert second.get("kfc") is not None


def test_failed_index_write_removes_new_file(tmp_path, clock, make_png):
    class FailingIndex(JsonIndexRepository):
        def save(self, entries):
            raise CacheIOError("index write", self.path, "disk full")

    cache = LogoCacheService(
        FailingIndex(tmp_path / "index.json"),
        cache_dir=tmp_path / "logos",
        clock=clock,
    )

    with pytest.raises(CacheIOError):
        cache.put("kfc", "1.0.0", "u", make_png(2048))

    assert list(cache.cache_dir.iterdir()) == []


def test_health_check(cache):
    assert cache.health_check() is True


def test_zero_ttl_is_not_replaced_by_default(tmp_path, index_store, clock, make_png):
    cache = LogoCacheService(index_store=index_store, cache_dir=tmp_path / "logos", max_size=0, ttl=0, clock=clock)

    cache.put("kfc", "1.0.0", "https://example.com/kfc.png", make_png(4096), 0.7)

    assert cache.ttl == 0
    assert cache.max_size == 0
    assert cache.get("kfc") is None
