"""HTTP handlers for cache administration.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

from fastapi import HTTPException, status

from response_cache.dto import (
    CacheEntryResponse,
    CacheStatsResponse,
    ClearCacheResponse,
    DeleteEntryResponse,
    FingerprintRequest,
    FingerprintResponse,
    HealthCheckResponse,
    ModeStatsItem,
    UsageItem,
)
from response_cache.exceptions import CacheUnavailableError, MalformedDescriptorError
from response_cache.services import ResponseCacheService


def _unavailable(action: str, error: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Failed to {action}: {error}",
    )


class CacheHandler:
    """HTTP handlers for cache administration.

    This handler delegates business logic to ResponseCacheService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Error handling and responses

    Example:
        ```python
        handler = CacheHandler(cache_service=cache_service)

        # Use in FastAPI route
        @app.get("/cache/stats", response_model=CacheStatsResponse)
        async def get_stats(handler: HandlerDep):
            return await handler.get_stats()
        ```
    """

    def __init__(self, cache_service: ResponseCacheService) -> None:
        """Initialize the cache handler.

        Args:
            cache_service: The cache service for business logic (required).
        """
        self._cache = cache_service

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /cache/stats requests.

        Returns:
            CacheStatsResponse with overall and per-mode statistics

        Raises:
            HTTPException: 503 if the cache backend is unavailable
        """
        try:
            stats = self._cache.get_stats()
        except CacheUnavailableError as e:
            raise _unavailable("get stats", e) from e

        return CacheStatsResponse(
            total_entries=stats.total_entries,
            total_hits=stats.total_hits,
            total_cost_saved=round(stats.total_cost_saved, 6),
            hit_rate=stats.hit_rate,
            by_mode={
                mode: ModeStatsItem(
                    count=mode_stats.count,
                    hits=mode_stats.hits,
                    cost_saved=round(mode_stats.cost_saved, 6),
                )
                for mode, mode_stats in stats.by_mode.items()
            },
        )

    async def clear_cache(self, mode: str | None = None) -> ClearCacheResponse:
        """Handle DELETE /cache requests.

        Args:
            mode: Only clear entries of this mode; None clears everything

        Returns:
            ClearCacheResponse with the number of deleted entries
        """
        try:
            count = self._cache.clear(mode)
        except CacheUnavailableError as e:
            raise _unavailable("clear cache", e) from e

        return ClearCacheResponse(deleted_count=count, mode=mode)

    async def fingerprint(self, request: FingerprintRequest) -> FingerprintResponse:
        """Handle POST /cache/fingerprint requests.

        Raises:
            HTTPException: 422 if the context cannot be canonicalized
        """
        try:
            fingerprint = self._cache.fingerprint(request.mode, request.context)
        except MalformedDescriptorError as e:
            raise HTTPException(
                status_code=422,
                detail=f"Malformed context: {e}",
            ) from e

        return FingerprintResponse(
            fingerprint=fingerprint,
            mode=request.mode,
            model_hint=self._cache.model_hint(request.mode),
        )

    async def get_entry(self, fingerprint: str) -> CacheEntryResponse:
        """Handle GET /cache/entries/{fingerprint} requests.

        Raises:
            HTTPException: 404 if absent or expired, 503 if the backend is unavailable
        """
        try:
            entry = self._cache.get_entry(fingerprint)
        except CacheUnavailableError as e:
            raise _unavailable("read cache entry", e) from e

        if entry is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No cache entry for fingerprint {fingerprint}",
            )

        usage = entry.response.usage
        return CacheEntryResponse(
            fingerprint=entry.fingerprint,
            mode=entry.mode,
            context=entry.context,
            content=entry.response.content,
            usage=UsageItem(**usage.to_dict()) if usage else None,
            hits=entry.hits,
            created_at=entry.created_at,
            last_accessed_at=entry.last_accessed_at,
            expires_at=entry.expires_at,
        )

    async def delete_entry(self, fingerprint: str) -> DeleteEntryResponse:
        """Handle DELETE /cache/entries/{fingerprint} requests."""
        try:
            deleted = self._cache.delete_entry(fingerprint)
        except CacheUnavailableError as e:
            raise _unavailable("delete cache entry", e) from e

        return DeleteEntryResponse(deleted=deleted, fingerprint=fingerprint)

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        is_healthy = self._cache.is_healthy()

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=is_healthy,
        )
