"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .artifact import Artifact, UsageInfo
from .cache_entry import CacheEntryEntity, CacheLookupEntity
from .cache_stats import CacheStatsEntity, ModeStatsEntity
from .descriptor import RequestDescriptor

__all__ = [
    "Artifact",
    "UsageInfo",
    "CacheEntryEntity",
    "CacheLookupEntity",
    "CacheStatsEntity",
    "ModeStatsEntity",
    "RequestDescriptor",
]
