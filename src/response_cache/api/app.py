from typing import Any

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from response_cache.api.dependencies import HandlerDep, lifespan
from response_cache.config import settings
from response_cache.dto import (
    CacheEntryResponse,
    CacheStatsResponse,
    ClearCacheResponse,
    DeleteEntryResponse,
    FingerprintRequest,
    FingerprintResponse,
    HealthCheckResponse,
)

app = FastAPI(
    title="AI Response Cache API",
    description="Administration of the deterministic AI response cache",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "AI Response Cache API",
        "version": "0.1.0",
        "description": "Administration of the deterministic AI response cache",
        "endpoints": {
            "stats": "/cache/stats",
            "clear": "/cache",
            "fingerprint": "/cache/fingerprint",
            "entries": "/cache/entries/{fingerprint}",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.get("/cache/stats", response_model=CacheStatsResponse)
async def get_stats(handler: HandlerDep) -> CacheStatsResponse:
    """Get aggregate cache statistics, overall and per mode."""
    return await handler.get_stats()


@app.delete("/cache", response_model=ClearCacheResponse)
async def clear_cache(
    handler: HandlerDep,
    mode: str | None = Query(None, description="Only clear entries of this mode"),
) -> ClearCacheResponse:
    """Clear all entries, or only the entries of one mode."""
    return await handler.clear_cache(mode)


@app.post("/cache/fingerprint", response_model=FingerprintResponse)
async def fingerprint(request: FingerprintRequest, handler: HandlerDep) -> FingerprintResponse:
    """
    Preview the fingerprint a request descriptor maps to.

    Args:
        request: Mode and context of the request.

    Returns:
        The fingerprint and the model hint it includes.
    """
    return await handler.fingerprint(request)


@app.get("/cache/entries/{fingerprint}", response_model=CacheEntryResponse)
async def get_entry(fingerprint: str, handler: HandlerDep) -> CacheEntryResponse:
    """Inspect a cache entry without counting a hit."""
    return await handler.get_entry(fingerprint)


@app.delete("/cache/entries/{fingerprint}", response_model=DeleteEntryResponse)
async def delete_entry(fingerprint: str, handler: HandlerDep) -> DeleteEntryResponse:
    """Delete a single cache entry."""
    return await handler.delete_entry(fingerprint)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "response_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
