from dataclasses import dataclass

from logo_agent.entities import LogoReference


@dataclass
class AcquisitionMetrics:
    """Track performance metrics for logo acquisition."""

    total_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    fetches: int = 0
    failures: int = 0
    deduplicated: int = 0
    total_fetch_time_ms: float = 0.0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_requests == 0:
            return 0.0
        return self.cache_hits / self.total_requests

    @property
    def avg_fetch_time_ms(self) -> float:
        """Calculate average time spent fetching and evaluating candidates."""
        if self.fetches == 0:
            return 0.0
        return self.total_fetch_time_ms / self.fetches

    def record_hit(self) -> None:
        """Record a cache hit."""
        self.total_requests += 1
        self.cache_hits += 1

    def record_miss(self) -> None:
        """Record a cache miss (or a forced refresh)."""
        self.total_requests += 1
        self.cache_misses += 1

    def record_fetch(self, duration_ms: float) -> None:
        """Record a completed fetch-and-evaluate round."""
        self.fetches += 1
        self.total_fetch_time_ms += duration_ms

    def record_failure(self) -> None:
        self.failures += 1

    def record_deduplicated(self) -> None:
        """Record a caller that joined an in-flight acquisition."""
        self.deduplicated += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "total_requests": self.total_requests,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": self.hit_rate,
            "fetches": self.fetches,
            "failures": self.failures,
            "deduplicated": self.deduplicated,
            "avg_fetch_time_ms": self.avg_fetch_time_ms,
        }


@dataclass
class AcquireResult:
    """Outcome of acquiring one brand in a batch."""

    brand: str
    reference: LogoReference | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.reference is not None


@dataclass
class PreloadSummary:
    """Aggregate outcome of a preload run."""

    loaded: list[str]
    failed: dict[str, str]

    @property
    def total(self) -> int:
        return len(self.loaded) + len(self.failed)
