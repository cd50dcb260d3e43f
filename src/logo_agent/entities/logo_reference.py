"""Logo reference domain entity."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class LogoReference:
    """Handle to a cached logo returned to callers.

    Attributes:
        brand: Cache key the logo is stored under
        url: Public URL of the cached file (e.g. "/logos/kfc-1.0.0-...png")
        local_path: Location of the file on disk
        version: Version tag of the cache entry
        source: Origin URL the image came from
        quality_score: Overall quality score at capture time
        from_cache: True when served from an existing entry without fetching
    """

    brand: str
    url: str
    local_path: Path
    version: str
    source: str
    quality_score: float
    from_cache: bool = False
