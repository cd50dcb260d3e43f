"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from logo_agent.config import settings
from logo_agent.handlers import LogoHandler
from logo_agent.services import LogoAgentService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> LogoHandler:
    """Dependency injection for LogoHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The LogoHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "logo_handler", None)
    if handler is None:
        raise RuntimeError("LogoHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Service (orchestration) - injected via create_app() or built from settings
    2. Handler (HTTP endpoints) - stored in app.state.logo_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Closes an agent created here and removes services from app.state
    """
    injected = getattr(app.state, "injected_agent", None)
    agent = injected or LogoAgentService.create()
    app.state.logo_agent = agent
    app.state.logo_handler = LogoHandler(agent=agent)

    logger.info("Logo agent initialized (cache dir: %s)", agent.cache.cache_dir)
    logger.info("Cache healthy: %s", agent.is_healthy())

    if settings.preload_on_startup:
        await agent.preload()

    yield

    if injected is None:
        await agent.aclose()
    del app.state.logo_handler
    del app.state.logo_agent
    logger.info("Logo agent shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[LogoHandler, Depends(get_handler)]
