"""Response DTOs for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class LogoResponse(BaseModel):
    """Response DTO for a single logo acquisition."""

    success: bool = Field(..., description="Whether a logo is available")
    brand: str = Field(..., description="Brand name as requested")
    url: str | None = Field(None, description="Public URL of the cached logo")
    version: str | None = Field(None, description="Version tag of the cached logo")
    source: str | None = Field(None, description="Origin URL of the image")
    quality: float | None = Field(None, description="Quality score at capture time", ge=0.0, le=1.0)
    cached: bool = Field(False, description="Whether the logo was served from the cache")
    error: str | None = Field(None, description="Failure reason when success is false")


class BatchLogoResponse(BaseModel):
    """Response DTO for a batch acquisition."""

    success: bool = Field(..., description="Whether every brand succeeded")
    results: dict[str, LogoResponse] = Field(
        default_factory=dict,
        description="Result per requested brand",
    )


class CacheEntryItem(BaseModel):
    """Single cache entry (in the stats entries array)."""

    brand: str
    version: str
    url: str = Field(..., description="Origin URL of the image")
    file_name: str = Field(..., description="File name inside the cache directory")
    size: int = Field(..., ge=0)
    cached_at: datetime
    expires_at: datetime
    access_count: int = Field(..., ge=0)
    last_accessed: datetime | None = None
    quality_score: float


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    total_size: int = Field(..., description="Total bytes of cached files", ge=0)
    total_count: int = Field(..., description="Number of cached brands", ge=0)
    max_size: int = Field(..., description="Configured maximum size in bytes", ge=0)
    usage_ratio: float = Field(..., description="total_size / max_size", ge=0.0)
    entries: list[CacheEntryItem] = Field(default_factory=list)
    performance: dict[str, float | int] = Field(
        default_factory=dict,
        description="Acquisition metrics since start-up",
    )


class ClearCacheResponse(BaseModel):
    """Response DTO for cache clear operations."""

    success: bool
    deleted_count: int = Field(..., ge=0)
    message: str


class BrandItem(BaseModel):
    """Supported brand description."""

    name: str
    display_name: str
    aliases: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache directory and index are usable")
