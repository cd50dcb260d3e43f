"""Conversion between cache entries and their persisted records."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from logo_agent.entities import CacheEntryEntity


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def entry_to_record(entry: CacheEntryEntity) -> dict[str, Any]:
    """Convert an entry to a JSON-serializable record."""
    last_accessed = entry.last_accessed or entry.cached_at
    return {
        "brand": entry.brand,
        "version": entry.version,
        "url": entry.url,
        "local_path": str(entry.local_path),
        "size": entry.size,
        "cached_at": entry.cached_at.isoformat(),
        "expires_at": entry.expires_at.isoformat(),
        "access_count": entry.access_count,
        "last_accessed": last_accessed.isoformat(),
        "quality_score": entry.quality_score,
    }


def record_to_entry(record: dict[str, Any]) -> CacheEntryEntity:
    """Convert a persisted record back to an entry.

    Raises:
        KeyError: If a required field is missing
        ValueError: If a field has an invalid value
    """
    cached_at = _parse_timestamp(record["cached_at"])
    last_accessed = record.get("last_accessed")
    return CacheEntryEntity(
        brand=record["brand"],
        version=record["version"],
        url=record["url"],
        local_path=Path(record["local_path"]),
        size=int(record["size"]),
        cached_at=cached_at,
        expires_at=_parse_timestamp(record["expires_at"]),
        access_count=int(record.get("access_count") or 0),
        last_accessed=_parse_timestamp(last_accessed) if last_accessed else cached_at,
        quality_score=float(record.get("quality_score", 0.0)),
    )
