"""Cache entry domain entities."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .artifact import Artifact


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached generation result.

    This is an internal representation used by services and repositories.
    For API contracts, use the DTO classes from the dto package.

    Attributes:
        fingerprint: SHA-256 hex digest of the request descriptor (primary key)
        mode: Generation mode that produced the entry
        context: Copy of the originating request context
        response: The stored artifact
        model: Denormalized model name from the artifact usage
        tokens_used: Denormalized token count from the artifact usage
        cost: Denormalized USD cost from the artifact usage
        hits: Number of read hits so far
        created_at: First write time, never changed afterwards
        last_accessed_at: Last hit or write time
        expires_at: Expiry time, or None if the entry never expires
    """

    fingerprint: str
    mode: str
    context: Any
    response: Artifact
    model: str | None
    tokens_used: int | None
    cost: float | None
    hits: int
    created_at: datetime
    last_accessed_at: datetime
    expires_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        """Check whether the entry is past its expiry time."""
        return self.expires_at is not None and self.expires_at < now


@dataclass(frozen=True)
class CacheLookupEntity:
    """Domain entity for a successful cache read.

    Attributes:
        entry: The entry as stored, with hits already incremented
        cache_age: Whole seconds since the entry was created
        total_hits: Hit count after this read
    """

    entry: CacheEntryEntity
    cache_age: int
    total_hits: int

    @property
    def artifact(self) -> Artifact:
        return self.entry.response
