"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

from contextlib import asynccontextmanager
from typing import Annotated

import structlog
from fastapi import Depends, FastAPI, Request

from response_cache.config import settings
from response_cache.handlers import CacheHandler
from response_cache.logging_config import configure_logging
from response_cache.repositories import RedisResponseCacheRepository
from response_cache.services import ResponseCacheService

logger = structlog.get_logger(__name__)


def get_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CacheHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Repository (data access) - created explicitly
    2. Service (business logic) - wrapped by the handler
    3. Handler (HTTP endpoints) - stored in app.state.cache_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Removes all services from app.state and closes the Redis client on shutdown
    """
    configure_logging()

    repository = RedisResponseCacheRepository.create()
    cache_service = ResponseCacheService.create(repository=repository)
    cache_handler = CacheHandler(cache_service=cache_service)

    app.state.cache_handler = cache_handler
    app.state.repository = repository

    # The cache is best-effort, so an unreachable Redis is not fatal at startup
    logger.info(
        "cache_service_initialized",
        redis_url=settings.redis_url,
        key_prefix=settings.cache_key_prefix,
        ttl=cache_service.ttl,
        healthy=cache_service.is_healthy(),
    )

    yield

    repository.client.close()
    del app.state.cache_handler
    del app.state.repository
    logger.info("cache_service_shut_down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CacheHandler, Depends(get_handler)]
