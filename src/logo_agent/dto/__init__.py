"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import BatchLogoRequest, LogoRequest
from .responses import (
    BatchLogoResponse,
    BrandItem,
    CacheEntryItem,
    CacheStatsResponse,
    ClearCacheResponse,
    HealthCheckResponse,
    LogoResponse,
)

__all__ = [
    "LogoRequest",
    "BatchLogoRequest",
    "LogoResponse",
    "BatchLogoResponse",
    "BrandItem",
    "CacheEntryItem",
    "CacheStatsResponse",
    "ClearCacheResponse",
    "HealthCheckResponse",
]
