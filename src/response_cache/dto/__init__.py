"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import FingerprintRequest
from .responses import (
    CacheEntryResponse,
    CacheStatsResponse,
    ClearCacheResponse,
    DeleteEntryResponse,
    FingerprintResponse,
    HealthCheckResponse,
    ModeStatsItem,
    UsageItem,
)

__all__ = [
    "FingerprintRequest",
    "CacheEntryResponse",
    "CacheStatsResponse",
    "ClearCacheResponse",
    "DeleteEntryResponse",
    "FingerprintResponse",
    "HealthCheckResponse",
    "ModeStatsItem",
    "UsageItem",
]
