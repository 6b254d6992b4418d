"""Cache service for core business logic.

This service is the single call path AI-backed endpoints use instead of
calling the generator directly: fingerprint, look up, generate on a
miss, store.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from response_cache.config import Settings, settings as default_settings
from response_cache.entities import Artifact, CacheEntryEntity, CacheLookupEntity, CacheStatsEntity
from response_cache.keys import build_descriptor, compute_fingerprint
from response_cache.protocols import ResponseCacheStore

logger = structlog.get_logger(__name__)

GenerateFn = Callable[[str, Any], Awaitable[Any]]


@dataclass(frozen=True)
class CacheMetadata:
    """How an invocation was served."""

    cached: bool
    cache_hit: bool | None = None
    cache_age: int | None = None
    total_hits: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"cached": self.cached}
        if self.cached:
            data.update(
                cache_hit=self.cache_hit,
                cache_age=self.cache_age,
                total_hits=self.total_hits,
            )
        return data


@dataclass(frozen=True)
class InvocationResult:
    """An artifact plus how it was served."""

    artifact: Artifact
    metadata: CacheMetadata

    @property
    def cached(self) -> bool:
        return self.metadata.cached


class ResponseCacheService:
    """Core cache orchestration service.

    This service depends on the ResponseCacheStore PROTOCOL, not a concrete
    implementation, so Redis can be swapped for any store (or a fake in tests).

    The cache never changes what a caller gets back, only what it costs:
    store failures degrade to "always miss", while generation failures
    propagate unchanged and are never cached.

    Example:
        ```python
        from response_cache.repositories import RedisResponseCacheRepository
        from response_cache.services import ResponseCacheService

        cache = ResponseCacheService.create(repository=RedisResponseCacheRepository.create())

        result = await cache.invoke("summary", {"topicIds": [1, 2, 3]}, generate_summary)
        result.artifact.text
        result.metadata.cached
        ```
    """

    def __init__(
        self,
        repository: ResponseCacheStore,
        ttl: int | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            repository: Cache storage backend (required).
            ttl: Default time-to-live in seconds. Defaults to settings.
            settings: Settings used for model-hint resolution. Defaults to the global settings.
        """
        self._repository = repository
        self._settings = settings or default_settings
        self._ttl = self._settings.cache_ttl if ttl is None else ttl

    @classmethod
    def create(
        cls,
        repository: ResponseCacheStore,
        ttl: int | None = None,
    ) -> "ResponseCacheService":
        """Factory method to create ResponseCacheService with sensible defaults.

        Args:
            repository: Cache storage backend (required).
            ttl: Time-to-live in seconds. If None, uses settings.

        Returns:
            Configured ResponseCacheService instance
        """
        return cls(repository=repository, ttl=ttl)

    def fingerprint(self, mode: str, context: Any) -> str:
        """Compute the fingerprint for ``mode``/``context``.

        Raises:
            MalformedDescriptorError: If the context cannot be canonicalized
        """
        return compute_fingerprint(build_descriptor(mode, context, self._settings))

    def model_hint(self, mode: str) -> str:
        """Return the model hint that fingerprints of ``mode`` include."""
        return build_descriptor(mode, None, self._settings).model_hint

    def _lookup(self, fingerprint: str) -> CacheLookupEntity | None:
        try:
            return self._repository.get(fingerprint)
        except Exception as e:
            logger.warning("cache_unavailable", operation="get", fingerprint=fingerprint[:16], error=str(e))
            return None

    def _store(self, fingerprint: str, mode: str, context: Any, artifact: Artifact, ttl: int) -> None:
        try:
            self._repository.set(fingerprint, mode, context, artifact, ttl)
        except Exception as e:
            logger.warning("cache_unavailable", operation="set", fingerprint=fingerprint[:16], error=str(e))

    async def invoke(
        self,
        mode: str,
        context: Any,
        generate_fn: GenerateFn,
        ttl: int | None = None,
        skip_cache: bool = False,
    ) -> InvocationResult:
        """Return a cached artifact for ``mode``/``context``, generating it on a miss.

        Business logic:
        1. Derive the fingerprint (malformed contexts fail here, loudly)
        2. Look it up; on a hit return the stored artifact without generating
        3. On a miss await ``generate_fn(mode, context)``
        4. Store the artifact under the same fingerprint
        5. Return it with ``cached=False``

        Args:
            mode: Generation mode
            context: Request parameters
            generate_fn: Async callable producing an Artifact (or a generation
                result, converted with Artifact.from_generation)
            ttl: Override the default TTL; <= 0 never expires
            skip_cache: Bypass the lookup but still store the fresh artifact

        Returns:
            InvocationResult with the artifact and cache metadata

        Raises:
            MalformedDescriptorError: If the context cannot be fingerprinted
            Exception: Whatever ``generate_fn`` raises, unchanged
        """
        fingerprint = self.fingerprint(mode, context)

        if not skip_cache:
            lookup = self._lookup(fingerprint)
            if lookup is not None:
                return InvocationResult(
                    artifact=lookup.artifact,
                    metadata=CacheMetadata(
                        cached=True,
                        cache_hit=True,
                        cache_age=lookup.cache_age,
                        total_hits=lookup.total_hits,
                    ),
                )

        result = await generate_fn(mode, context)
        artifact = result if isinstance(result, Artifact) else Artifact.from_generation(result)
        # Misses return what later hits will read back
        artifact = artifact.normalized()

        self._store(fingerprint, mode, context, artifact, self._ttl if ttl is None else ttl)
        logger.info(
            "generation_complete",
            mode=mode,
            fingerprint=fingerprint[:16],
            model=artifact.usage.model if artifact.usage else None,
            cost_usd=artifact.usage.cost_usd if artifact.usage else None,
        )
        return InvocationResult(artifact=artifact, metadata=CacheMetadata(cached=False))

    def get_entry(self, fingerprint: str) -> CacheEntryEntity | None:
        """Read an entry for auditing without counting a hit."""
        return self._repository.peek(fingerprint)

    def delete_entry(self, fingerprint: str) -> bool:
        """Delete a single entry by fingerprint.

        Returns:
            True if deleted, False otherwise
        """
        return self._repository.delete(fingerprint)

    def clear(self, mode: str | None = None) -> int:
        """Clear all cache entries, or only one mode's.

        Returns:
            Number of entries deleted
        """
        return self._repository.clear(mode)

    def get_stats(self) -> CacheStatsEntity:
        """Get aggregate cache statistics."""
        return self._repository.get_stats()

    def is_healthy(self) -> bool:
        """Check if the cache store is healthy."""
        return self._repository.health_check()

    @property
    def ttl(self) -> int:
        """Get the default time-to-live in seconds."""
        return self._ttl

    @property
    def repository(self) -> ResponseCacheStore:
        """Get the underlying repository (for testing)."""
        return self._repository
