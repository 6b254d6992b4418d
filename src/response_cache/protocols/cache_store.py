"""Cache storage protocol.

Defines the interface for any persistent store that can hold generation
results keyed by fingerprint, with expiry and hit accounting.

Implementations can include:
- Redis (default)
- PostgreSQL
- Any other key-value store with per-record atomic updates
"""

from typing import Any, Protocol, runtime_checkable

from response_cache.entities import (
    Artifact,
    CacheEntryEntity,
    CacheLookupEntity,
    CacheStatsEntity,
)


@runtime_checkable
class ResponseCacheStore(Protocol):
    """Protocol for response cache storage backends.

    ``get`` and ``set`` are best-effort: they never raise for backend
    failures. The administrative operations (``clear``, ``get_stats``,
    ``peek``, ``delete``) raise CacheUnavailableError instead.
    """

    def get(self, fingerprint: str) -> CacheLookupEntity | None:
        """Read an entry, counting a hit.

        Expired entries are deleted and reported as a miss.

        Args:
            fingerprint: The entry key

        Returns:
            CacheLookupEntity on hit, None on miss or backend failure
        """
        ...

    def set(
        self,
        fingerprint: str,
        mode: str,
        context: Any,
        artifact: Artifact,
        ttl: int | None = None,
    ) -> None:
        """Insert or replace an entry.

        Args:
            fingerprint: The entry key
            mode: Generation mode
            context: Originating request context
            artifact: The artifact to store
            ttl: Seconds until expiry; <= 0 never expires, None uses the default
        """
        ...

    def peek(self, fingerprint: str) -> CacheEntryEntity | None:
        """Read an entry without counting a hit.

        Returns:
            The entry, or None if absent or expired
        """
        ...

    def delete(self, fingerprint: str) -> bool:
        """Delete a single entry.

        Returns:
            True if deleted, False if absent
        """
        ...

    def clear(self, mode: str | None = None) -> int:
        """Delete all entries, or only those of one mode.

        Returns:
            Number of entries deleted
        """
        ...

    def get_stats(self) -> CacheStatsEntity:
        """Aggregate entry, hit and cost statistics overall and per mode."""
        ...

    def health_check(self) -> bool:
        """Check if the store is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...
