"""Error taxonomy for logo acquisition.

Only ``SourceFetchFailed`` is absorbed internally (by the fetcher); every
other error propagates to the caller of the service layer.
"""

from pathlib import Path


class LogoAgentError(Exception):
    """Base class for all logo agent failures."""


class BrandUnrecognized(LogoAgentError):
    """Raised when a brand name cannot be resolved to a known identity."""

    def __init__(self, brand: str) -> None:
        super().__init__(f"Brand not recognized: {brand}")
        self.brand = brand


class NoSources(LogoAgentError):
    """Raised when no candidate source URLs exist for a brand."""

    def __init__(self, brand: str) -> None:
        super().__init__(f"No search sources for brand: {brand}")
        self.brand = brand


class SourceFetchFailed(LogoAgentError):
    """Raised when a single source cannot produce a valid candidate."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Fetching {url} failed: {reason}")
        self.url = url
        self.reason = reason


class AllSourcesFailed(LogoAgentError):
    """Raised when every source for a brand failed."""

    def __init__(self, brand: str | None, attempted: int) -> None:
        target = f" for brand: {brand}" if brand else ""
        super().__init__(f"Failed to fetch logo from all {attempted} sources{target}")
        self.brand = brand
        self.attempted = attempted


class CacheIOError(LogoAgentError):
    """Raised when a cache file or the cache index cannot be read or written."""

    def __init__(self, operation: str, path: Path | str, detail: str | None = None) -> None:
        message = f"Cache {operation} failed for {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation
        self.path = str(path)


class EmptyCandidateSet(LogoAgentError):
    """Raised when best-candidate selection is invoked with no candidates."""

    def __init__(self) -> None:
        super().__init__("No logos to evaluate")
