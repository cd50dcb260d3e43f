"""
Shared fixtures for the logo agent tests.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from logo_agent.entities import FetchCandidate
from logo_agent.errors import AllSourcesFailed
from logo_agent.repositories import JsonIndexRepository
from logo_agent.services import (
    BrandResolver,
    LogoAgentService,
    LogoCacheService,
    QualityEvaluator,
    RetryPolicy,
    SourceResolver,
)

PNG_HEADER = b"\x89PNG\r\n\x1a\n"
KIB = 1024


def png_bytes(size: int) -> bytes:
    """Build a payload of exactly ``size`` bytes with a PNG signature."""
    return PNG_HEADER + b"\x00" * (size - len(PNG_HEADER))


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeFetcher:
    """CandidateFetcher double returning one PNG candidate per configured size.

    ``failures`` calls fail before fetching starts to succeed; ``fail_when``
    fails every call whose sources match the predicate.
    """

    def __init__(self, sizes=(5 * KIB, 300 * KIB), failures=0, fail_when=None):
        self.sizes = sizes
        self.failures = failures
        self.fail_when = fail_when
        self.calls = []
        self.closed = False

    async def fetch(self, sources, per_source_timeout):
        self.calls.append((list(sources), per_source_timeout))
        await asyncio.sleep(0)
        if self.failures > 0:
            self.failures -= 1
            raise AllSourcesFailed(None, len(sources))
        if self.fail_when is not None and any(self.fail_when(url) for url in sources):
            raise AllSourcesFailed(None, len(sources))
        return [
            FetchCandidate(data=png_bytes(size), source=f"https://cdn{i}.example/logo.png")
            for i, size in enumerate(self.sizes)
        ]

    async def aclose(self):
        self.closed = True


@pytest.fixture
def make_png():
    """Factory for valid PNG payloads of a given size."""
    return png_bytes


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def index_store(tmp_path):
    return JsonIndexRepository(tmp_path / "index.json")


@pytest.fixture
def cache(tmp_path, index_store, clock):
    """Cache with a 1 MiB limit and a one hour TTL."""
    return LogoCacheService(
        index_store=index_store,
        cache_dir=tmp_path / "logos",
        max_size=1024 * 1024,
        ttl=3600,
        public_url_prefix="/logos",
        clock=clock,
    )


@pytest.fixture
def sleeps():
    """Backoff delays requested by agents built with build_agent."""
    return []


@pytest.fixture
def build_agent(tmp_path, clock, sleeps):
    """Factory for agents wired to a temporary cache and a fake fetcher."""

    async def record_sleep(delay):
        sleeps.append(delay)

    def build(fetcher=None, source_resolver=None, index_store=None):
        cache = LogoCacheService(
            index_store=index_store or JsonIndexRepository(tmp_path / "index.json"),
            cache_dir=tmp_path / "logos",
            max_size=10 * 1024 * 1024,
            ttl=3600,
            public_url_prefix="/logos",
            clock=clock,
        )
        return LogoAgentService(
            resolver=BrandResolver(),
            source_resolver=source_resolver or SourceResolver(),
            fetcher=fetcher or FakeFetcher(),
            evaluator=QualityEvaluator(),
            cache=cache,
            retry_policy=RetryPolicy(max_retries=2, base_delay=1.0),
            source_timeout=7.5,
            preload_brands=("mcdonalds", "starbucks"),
            sleep=record_sleep,
        )

    return build
