from typing import Annotated, Any

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from logo_agent.api.dependencies import HandlerDep, lifespan
from logo_agent.config import configure_logging, settings
from logo_agent.dto import (
    BatchLogoRequest,
    BatchLogoResponse,
    BrandItem,
    CacheStatsResponse,
    ClearCacheResponse,
    HealthCheckResponse,
    LogoRequest,
    LogoResponse,
)
from logo_agent.services import LogoAgentService


def create_app(agent: LogoAgentService | None = None) -> FastAPI:
    """Build the API application.

    Args:
        agent: Preconfigured agent to serve. If None, one is created from
               settings at start-up and closed at shutdown.

    Returns:
        The FastAPI application
    """
    app = FastAPI(
        title="Logo Agent API",
        description="Brand logo acquisition with multi-source fetching and a bounded local cache",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.injected_agent = agent

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    cache_dir = agent.cache.cache_dir if agent is not None else settings.cache_dir
    app.mount(
        settings.public_url_prefix,
        StaticFiles(directory=cache_dir, check_dir=False),
        name="logos",
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Logo Agent API",
            "version": "0.1.0",
            "description": "Brand logo acquisition with multi-source fetching and a bounded local cache",
            "endpoints": {
                "logos": "/api/logos",
                "batch": "/api/logos/batch",
                "stats": "/api/logos/stats",
                "brands": "/api/brands",
                "files": settings.public_url_prefix,
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        result = await handler.health_check()
        if not result.cache_healthy:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Logo cache is not usable",
            )
        return result

    @app.get("/api/logos", response_model=LogoResponse)
    async def get_logo(
        handler: HandlerDep,
        brand: Annotated[str, Query(min_length=1)],
        refresh: bool = False,
    ) -> LogoResponse:
        """
        Get the logo of one brand, fetching it on a cache miss.

        Args:
            brand: Brand name, alias or native-language name.
            refresh: Bypass the cache and fetch again.

        Returns:
            Logo response with the public URL of the cached file.
        """
        return await handler.get_logo(LogoRequest(brand=brand, refresh=refresh))

    @app.get("/api/logos/batch", response_model=BatchLogoResponse)
    async def get_logos(
        handler: HandlerDep,
        brands: Annotated[str, Query(min_length=1, description="Comma separated brand names")],
        refresh: bool = False,
    ) -> BatchLogoResponse:
        """Get the logos of several brands; failures are reported per brand."""
        try:
            request = BatchLogoRequest(brands=brands, refresh=refresh)  # type: ignore[arg-type]
        except ValidationError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid brands parameter: {brands!r}",
            ) from e
        return await handler.get_logos(request)

    @app.get("/api/logos/stats", response_model=CacheStatsResponse)
    async def get_stats(handler: HandlerDep) -> CacheStatsResponse:
        """Get cache statistics and acquisition metrics."""
        return await handler.get_stats()

    @app.post("/api/logos/{brand}/refresh", response_model=LogoResponse)
    async def refresh_logo(brand: str, handler: HandlerDep) -> LogoResponse:
        """Fetch a brand's logo again, replacing the cached one."""
        return await handler.refresh_logo(brand)

    @app.put("/api/logos/{brand}", response_model=LogoResponse)
    async def upload_logo(brand: str, request: Request, handler: HandlerDep) -> LogoResponse:
        """
        Upload a custom logo for a brand.

        The request body is the raw image; Content-Type must be an image type.
        """
        data = await request.body()
        return await handler.upload_logo(brand, data, request.headers.get("content-type"))

    @app.delete("/api/logos/{brand}", response_model=ClearCacheResponse)
    async def clear_brand(brand: str, handler: HandlerDep) -> ClearCacheResponse:
        """Clear the cached logo of one brand."""
        return await handler.clear_brand(brand)

    @app.delete("/api/logos", response_model=ClearCacheResponse)
    async def clear_all(handler: HandlerDep) -> ClearCacheResponse:
        """Clear every cached logo."""
        return await handler.clear_all()

    @app.get("/api/brands", response_model=list[BrandItem])
    async def list_brands(handler: HandlerDep) -> list[BrandItem]:
        """List the supported brands."""
        return await handler.list_brands()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(
        "logo_agent.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
