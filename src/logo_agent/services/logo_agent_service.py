"""Logo acquisition orchestration.

Composes identity resolution, source resolution, concurrent fetching,
evaluation and the cache into the acquire pipeline:

    resolve identity -> cache lookup -> resolve sources -> fetch
    -> select best -> cache put -> reference

Identity is resolved first so that every cache key is a canonical name.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from logo_agent.catalog import get_source_configs
from logo_agent.config import settings
from logo_agent.entities import BrandIdentity, CacheStats, LogoReference
from logo_agent.errors import AllSourcesFailed, BrandUnrecognized, CacheIOError, LogoAgentError, NoSources
from logo_agent.models import AcquireResult, AcquisitionMetrics, PreloadSummary
from logo_agent.protocols import CandidateFetcher, IndexStore
from logo_agent.repositories import HttpLogoFetcher, JsonIndexRepository, RedisIndexRepository

from .cache_service import LogoCacheService
from .identity_resolver import BrandResolver
from .quality_evaluator import QualityEvaluator
from .source_resolver import SourceResolver

logger = logging.getLogger(__name__)

# Version tag for entries fetched for brands without a configured version
DEFAULT_VERSION = "smart"
CUSTOM_VERSION = "custom"
UPLOAD_ORIGIN = "upload"
UPLOAD_QUALITY_SCORE = 0.8


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with linear backoff, built on tenacity.

    The ``n``-th failed attempt (one based) is followed by a delay of
    ``base_delay * n`` seconds, for at most ``max_retries`` retries. Only
    LogoAgentError is retried.

    Cache I/O errors are not retried. Unrecognized brands are not retried
    either, unlike a retry-everything loop: resolution is deterministic, so
    another attempt can only return the same answer after a delay.
    """

    max_retries: int = 2
    base_delay: float = 1.0
    non_retryable: tuple[type[Exception], ...] = (CacheIOError, BrandUnrecognized)

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(max_retries=settings.max_retries, base_delay=settings.retry_base_delay)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def retrying(self, sleep: Callable[[float], Awaitable[None]] | None = None) -> AsyncRetrying:
        """Build the tenacity retry controller for one retried call.

        Args:
            sleep: Awaitable used for backoff delays. Defaults to asyncio.sleep.

        Returns:
            AsyncRetrying that re-raises the last error once attempts run out
        """
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=self.base_delay, increment=self.base_delay),
            retry=(
                retry_if_exception_type(LogoAgentError)
                & retry_if_not_exception_type(self.non_retryable)
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=sleep or asyncio.sleep,
            reraise=True,
        )


class LogoAgentService:
    """Acquire brand logos, fetching only on cache misses.

    Concurrent acquisitions of the same brand share one in-flight task, so
    they cause one fetch and one cache write.

    Example:
        ```python
        from logo_agent.services import LogoAgentService

        agent = LogoAgentService.create()
        ref = await agent.acquire("麦当劳")
        print(ref.url)  # /logos/mcdonalds-2.0.0-....png

        results = await agent.acquire_many(["kfc", "sbux"])
        await agent.aclose()
        ```
    """

    def __init__(
        self,
        resolver: BrandResolver,
        source_resolver: SourceResolver,
        fetcher: CandidateFetcher,
        evaluator: QualityEvaluator,
        cache: LogoCacheService,
        retry_policy: RetryPolicy | None = None,
        source_timeout: float | None = None,
        preload_brands: tuple[str, ...] | list[str] | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            resolver: Brand identity resolver (required).
            source_resolver: Source URL resolver (required).
            fetcher: Candidate fetcher (required).
            evaluator: Candidate evaluator (required).
            cache: Logo cache (required).
            retry_policy: Retry policy for acquire_with_retry. Defaults to settings.
            source_timeout: Per-source fetch timeout in seconds. Defaults to settings.
            preload_brands: Brands preloaded by preload(). Defaults to settings.
            sleep: Awaitable used for backoff delays (for testing).
        """
        self._resolver = resolver
        self._sources = source_resolver
        self._fetcher = fetcher
        self._evaluator = evaluator
        self._cache = cache
        self._retry = retry_policy or RetryPolicy.from_settings()
        self._source_timeout = settings.source_timeout if source_timeout is None else source_timeout
        self._preload_brands = tuple(preload_brands if preload_brands is not None else settings.preload_brands)
        self._sleep = sleep or asyncio.sleep
        self._inflight: dict[str, asyncio.Task[LogoReference]] = {}
        self._metrics = AcquisitionMetrics()

    @classmethod
    def create(
        cls,
        index_store: IndexStore | None = None,
        fetcher: CandidateFetcher | None = None,
        cache_dir: str | None = None,
        max_size: int | None = None,
        ttl: int | None = None,
    ) -> "LogoAgentService":
        """Factory method wiring the default implementations from settings.

        Args:
            index_store: Cache index backend. If None, JSON file or Redis per settings.
            fetcher: Candidate fetcher. If None, HttpLogoFetcher.
            cache_dir: Image directory. If None, uses settings.
            max_size: Maximum cache size in bytes. If None, uses settings.
            ttl: Entry time-to-live in seconds. If None, uses settings.

        Returns:
            Configured LogoAgentService
        """
        if index_store is None:
            if settings.uses_redis_index:
                index_store = RedisIndexRepository.create()
            else:
                index_store = JsonIndexRepository.create()

        source_configs = get_source_configs(settings.brand_sources_path)
        return cls(
            resolver=BrandResolver(source_configs=source_configs),
            source_resolver=SourceResolver(source_configs=source_configs),
            fetcher=fetcher or HttpLogoFetcher.create(),
            evaluator=QualityEvaluator(),
            cache=LogoCacheService.create(
                index_store=index_store,
                cache_dir=cache_dir,
                max_size=max_size,
                ttl=ttl,
            ),
        )

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    async def acquire(self, brand_name: str, force_refresh: bool = False) -> LogoReference:
        """Return a cached logo for the brand, fetching it on a miss.

        Args:
            brand_name: Free-form brand name
            force_refresh: Skip the cache lookup and fetch again

        Returns:
            LogoReference to the cached file

        Raises:
            BrandUnrecognized: If the brand cannot be resolved
            NoSources: If no source URLs exist for the brand
            AllSourcesFailed: If every source failed
            CacheIOError: If the cache cannot be read or written
        """
        identity = self._resolver.resolve(brand_name)
        if identity is None:
            self._metrics.record_failure()
            raise BrandUnrecognized(brand_name)

        if not force_refresh:
            cached = self._cache.get(identity.name)
            if cached is not None:
                self._metrics.record_hit()
                return cached

        self._metrics.record_miss()

        task = self._inflight.get(identity.name)
        if task is None:
            task = asyncio.create_task(self._fetch_and_store(identity))
            self._inflight[identity.name] = task
            task.add_done_callback(lambda done: self._finish_inflight(identity.name, done))
        else:
            logger.debug("Joining in-flight acquisition for %s", identity.name)
            self._metrics.record_deduplicated()

        try:
            return await asyncio.shield(task)
        except LogoAgentError:
            self._metrics.record_failure()
            raise

    def _finish_inflight(self, key: str, task: "asyncio.Task[LogoReference]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Acquisition for %s failed: %s", key, task.exception())

    async def _fetch_and_store(self, identity: BrandIdentity) -> LogoReference:
        sources = self._sources.sources(identity)
        if not sources:
            raise NoSources(identity.name)

        started = time.perf_counter()
        try:
            candidates = await self._fetcher.fetch(sources, self._source_timeout)
        except AllSourcesFailed as e:
            raise AllSourcesFailed(identity.name, e.attempted) from e

        best = self._evaluator.select_best(candidates)
        self._metrics.record_fetch((time.perf_counter() - started) * 1000)
        logger.info(
            "Selected logo for %s from %s (score %.3f, %d/%d candidates)",
            identity.name,
            best.source,
            best.quality.overall,
            len(candidates),
            len(sources),
        )

        config = self._sources.config_for(identity)
        version = config.version if config is not None else DEFAULT_VERSION
        return self._cache.put(
            identity.name,
            version,
            best.source,
            best.data,
            best.quality.overall,
        )

    async def acquire_with_retry(
        self,
        brand_name: str,
        force_refresh: bool = False,
        max_retries: int | None = None,
    ) -> LogoReference:
        """Acquire with bounded retries and linear backoff.

        Args:
            brand_name: Free-form brand name
            force_refresh: Skip the cache lookup on every attempt
            max_retries: Override the policy's retry count

        Returns:
            LogoReference from the first successful attempt

        Raises:
            LogoAgentError: The last error once every attempt failed, or
                immediately for non-retryable errors (cache I/O, unknown brand)
        """
        policy = self._retry if max_retries is None else replace(self._retry, max_retries=max_retries)

        try:
            async for attempt in policy.retrying(sleep=self._sleep):
                with attempt:
                    return await self.acquire(brand_name, force_refresh=force_refresh)
        except LogoAgentError as e:
            logger.error("Giving up on %s: %s", brand_name, e)
            raise
        raise AssertionError("retry loop ended without a result")

    async def acquire_many(
        self,
        brand_names: list[str],
        force_refresh: bool = False,
    ) -> dict[str, AcquireResult]:
        """Acquire several brands concurrently; failures do not abort siblings.

        Returns:
            Mapping of requested name to its AcquireResult
        """

        async def acquire_one(name: str) -> AcquireResult:
            try:
                reference = await self.acquire(name, force_refresh=force_refresh)
            except LogoAgentError as e:
                return AcquireResult(brand=name, error=str(e))
            return AcquireResult(brand=name, reference=reference)

        results = await asyncio.gather(*(acquire_one(name) for name in brand_names))
        return {result.brand: result for result in results}

    async def preload(self, brand_names: list[str] | None = None) -> PreloadSummary:
        """Warm the cache for the given (or configured) brands.

        Returns:
            PreloadSummary listing loaded brands and failures
        """
        names = list(brand_names) if brand_names is not None else list(self._preload_brands)
        logger.info("Preloading logos for %d brands", len(names))

        results = await self.acquire_many(names)
        summary = PreloadSummary(
            loaded=[name for name, result in results.items() if result.success],
            failed={name: result.error or "" for name, result in results.items() if not result.success},
        )

        for name, error in summary.failed.items():
            logger.warning("Preload failed for %s: %s", name, error)
        logger.info("Preload finished: %d loaded, %d failed", len(summary.loaded), len(summary.failed))
        return summary

    def upload_custom(self, brand_name: str, data: bytes) -> LogoReference:
        """Store caller-validated image bytes as the brand's logo.

        Skips fetching and evaluation. Content-type and size checks are the
        caller's responsibility.

        Raises:
            BrandUnrecognized: If the brand cannot be resolved
            CacheIOError: If the cache cannot be written
        """
        identity = self._resolver.resolve(brand_name)
        if identity is None:
            raise BrandUnrecognized(brand_name)
        return self._cache.put(identity.name, CUSTOM_VERSION, UPLOAD_ORIGIN, data, UPLOAD_QUALITY_SCORE)

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    def recognize(self, brand_name: str) -> BrandIdentity | None:
        return self._resolver.resolve(brand_name)

    def supported_brands(self) -> list[BrandIdentity]:
        return self._resolver.all_brands()

    def stats(self) -> CacheStats:
        return self._cache.stats()

    def clear(self, brand_name: str) -> bool:
        """Clear the cached logo of a brand.

        Returns:
            True if an entry was removed
        """
        identity = self._resolver.resolve(brand_name)
        key = identity.name if identity is not None else brand_name
        return self._cache.clear(key)

    def clear_all(self) -> int:
        return self._cache.clear_all()

    def is_healthy(self) -> bool:
        return self._cache.health_check()

    async def aclose(self) -> None:
        """Cancel in-flight acquisitions and release the fetcher."""
        tasks = list(self._inflight.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        await self._fetcher.aclose()

    @property
    def metrics(self) -> AcquisitionMetrics:
        return self._metrics

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry

    @property
    def cache(self) -> LogoCacheService:
        """Get the underlying cache (for testing)."""
        return self._cache

    @property
    def fetcher(self) -> CandidateFetcher:
        """Get the underlying fetcher (for testing)."""
        return self._fetcher
