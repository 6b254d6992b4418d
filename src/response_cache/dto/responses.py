"""Response DTOs for API endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ModeStatsItem(BaseModel):
    """Statistics for one generation mode (in by_mode)."""

    count: int = Field(..., description="Number of entries for this mode", ge=0)
    hits: int = Field(..., description="Cumulative hits for this mode", ge=0)
    cost_saved: float = Field(..., description="USD not spent thanks to hits", ge=0.0)


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    total_entries: int = Field(..., description="Total number of cached entries", ge=0)
    total_hits: int = Field(..., description="Cumulative hits across all entries", ge=0)
    total_cost_saved: float = Field(
        ...,
        description="Sum of cost x hits over all entries (USD)",
        ge=0.0,
    )
    hit_rate: float = Field(
        ...,
        description="Percentage: 100 * total_hits / (total_hits + total_entries)",
        ge=0.0,
        le=100.0,
    )
    by_mode: dict[str, ModeStatsItem] = Field(
        default_factory=dict,
        description="The same metrics broken down by generation mode",
    )


class ClearCacheResponse(BaseModel):
    """Response DTO for cache clear operation."""

    deleted_count: int = Field(..., description="Number of entries deleted", ge=0)
    mode: str | None = Field(None, description="Mode filter that was applied, if any")


class DeleteEntryResponse(BaseModel):
    """Response DTO for single entry deletion."""

    deleted: bool = Field(..., description="Whether an entry was deleted")
    fingerprint: str = Field(..., description="The fingerprint that was targeted")


class FingerprintResponse(BaseModel):
    """Response DTO for fingerprint preview."""

    fingerprint: str = Field(..., description="SHA-256 hex digest identifying the entry")
    mode: str = Field(..., description="The requested mode")
    model_hint: str = Field(..., description="Model hint included in the fingerprint")


class UsageItem(BaseModel):
    """Usage info stored with an artifact."""

    model: str | None = None
    tokens_used: int | None = None
    cost_usd: float | None = None


class CacheEntryResponse(BaseModel):
    """Response DTO for a single cache entry (audit view)."""

    fingerprint: str = Field(..., description="The entry key")
    mode: str = Field(..., description="Generation mode")
    context: Any = Field(None, description="Originating request context")
    content: Any = Field(None, description="Cached artifact content")
    usage: UsageItem | None = Field(None, description="Usage info of the cached artifact")
    hits: int = Field(..., description="Read hits so far", ge=0)
    created_at: datetime
    last_accessed_at: datetime
    expires_at: datetime | None = Field(None, description="Null means the entry never expires")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
