"""HTTP handlers for logo operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import logging

from fastapi import HTTPException, status

from logo_agent.dto import (
    BatchLogoRequest,
    BatchLogoResponse,
    BrandItem,
    CacheEntryItem,
    CacheStatsResponse,
    ClearCacheResponse,
    HealthCheckResponse,
    LogoRequest,
    LogoResponse,
)
from logo_agent.dto.requests import MAX_UPLOAD_BYTES, UPLOAD_CONTENT_TYPE_PREFIX
from logo_agent.entities import LogoReference
from logo_agent.errors import AllSourcesFailed, BrandUnrecognized, LogoAgentError, NoSources
from logo_agent.services import LogoAgentService

logger = logging.getLogger(__name__)


def _to_response(brand: str, reference: LogoReference) -> LogoResponse:
    return LogoResponse(
        success=True,
        brand=brand,
        url=reference.url,
        version=reference.version,
        source=reference.source,
        quality=max(0.0, min(1.0, reference.quality_score)),
        cached=reference.from_cache,
    )


def _http_error(error: LogoAgentError, action: str) -> HTTPException:
    if isinstance(error, BrandUnrecognized):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, (AllSourcesFailed, NoSources)):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=f"Failed to {action}: {error}")


class LogoHandler:
    """HTTP handlers for logo operations.

    This handler delegates business logic to LogoAgentService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Upload validation (content type, size)

    Example:
        ```python
        from logo_agent.services import LogoAgentService
        from logo_agent.handlers import LogoHandler

        handler = LogoHandler(agent=LogoAgentService.create())

        @app.get("/api/logos", response_model=LogoResponse)
        async def get_logo(brand: str, refresh: bool = False):
            return await handler.get_logo(LogoRequest(brand=brand, refresh=refresh))
        ```
    """

    def __init__(self, agent: LogoAgentService) -> None:
        """Initialize the logo handler.

        Args:
            agent: The logo agent service for business logic (required).
        """
        self._agent = agent

    async def get_logo(self, request: LogoRequest) -> LogoResponse:
        """Handle GET /api/logos requests.

        Raises:
            HTTPException: 404 for unknown brands, 502 when every source failed
        """
        try:
            reference = await self._agent.acquire_with_retry(request.brand, force_refresh=request.refresh)
        except LogoAgentError as e:
            raise _http_error(e, "get logo") from e
        return _to_response(request.brand, reference)

    async def get_logos(self, request: BatchLogoRequest) -> BatchLogoResponse:
        """Handle GET /api/logos/batch requests.

        Failures are reported per brand instead of failing the request.
        """
        results = await self._agent.acquire_many(request.brands, force_refresh=request.refresh)

        items = {}
        for name, result in results.items():
            if result.reference is not None:
                items[name] = _to_response(name, result.reference)
            else:
                items[name] = LogoResponse(success=False, brand=name, error=result.error)

        return BatchLogoResponse(
            success=all(item.success for item in items.values()),
            results=items,
        )

    async def refresh_logo(self, brand: str) -> LogoResponse:
        """Handle POST /api/logos/{brand}/refresh requests."""
        return await self.get_logo(LogoRequest(brand=brand, refresh=True))

    async def upload_logo(self, brand: str, data: bytes, content_type: str | None) -> LogoResponse:
        """Handle PUT /api/logos/{brand} requests.

        Args:
            brand: Brand name from the path
            data: Raw request body
            content_type: Request Content-Type header

        Raises:
            HTTPException: 415 for non-image uploads, 413 above 5 MiB,
                400 for an empty body, 404 for unknown brands
        """
        if not content_type or not content_type.startswith(UPLOAD_CONTENT_TYPE_PREFIX):
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                detail="Invalid file type. Only images are allowed.",
            )

        if not data:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing file data.",
            )

        if len(data) > MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=413,
                detail="File too large. Maximum size is 5MB.",
            )

        try:
            reference = self._agent.upload_custom(brand, data)
        except LogoAgentError as e:
            raise _http_error(e, "upload logo") from e

        logger.info("Stored custom logo for %s (%d bytes)", brand, len(data))
        return _to_response(brand, reference)

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /api/logos/stats requests."""
        try:
            stats = self._agent.stats()
        except LogoAgentError as e:
            raise _http_error(e, "get stats") from e

        return CacheStatsResponse(
            total_size=stats.total_size,
            total_count=stats.total_count,
            max_size=stats.max_size,
            usage_ratio=stats.usage_ratio,
            entries=[
                CacheEntryItem(
                    brand=entry.brand,
                    version=entry.version,
                    url=entry.url,
                    file_name=entry.local_path.name,
                    size=entry.size,
                    cached_at=entry.cached_at,
                    expires_at=entry.expires_at,
                    access_count=entry.access_count,
                    last_accessed=entry.last_accessed,
                    quality_score=entry.quality_score,
                )
                for entry in stats.entries
            ],
            performance=self._agent.metrics.to_dict(),
        )

    async def clear_brand(self, brand: str) -> ClearCacheResponse:
        """Handle DELETE /api/logos/{brand} requests."""
        try:
            removed = self._agent.clear(brand)
        except LogoAgentError as e:
            raise _http_error(e, "clear cache") from e

        return ClearCacheResponse(
            success=True,
            deleted_count=1 if removed else 0,
            message=f"Cache cleared for brand: {brand}",
        )

    async def clear_all(self) -> ClearCacheResponse:
        """Handle DELETE /api/logos requests."""
        try:
            count = self._agent.clear_all()
        except LogoAgentError as e:
            raise _http_error(e, "clear cache") from e

        return ClearCacheResponse(
            success=True,
            deleted_count=count,
            message="All cache cleared",
        )

    async def list_brands(self) -> list[BrandItem]:
        """Handle GET /api/brands requests."""
        return [
            BrandItem(
                name=brand.name,
                display_name=brand.display_name,
                aliases=sorted(brand.aliases),
                categories=sorted(brand.categories),
            )
            for brand in self._agent.supported_brands()
        ]

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        is_healthy = self._agent.is_healthy()

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=is_healthy,
        )
