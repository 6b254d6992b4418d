"""Response Cache - Deterministic caching of AI-generated responses.

This package provides a layered architecture for memoizing expensive
generation calls keyed by a fingerprint of what was asked:

Layers:
    - keys: Fingerprint derivation (canonical JSON + SHA-256)
    - protocols: Interface contracts (ResponseCacheStore)
    - repositories: Data access implementations
    - services: Business logic (the cache-aware invocation wrapper)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from response_cache import RedisResponseCacheRepository, ResponseCacheService

    cache = ResponseCacheService.create(repository=RedisResponseCacheRepository.create())
    result = await cache.invoke("summary", {"topicIds": [1, 2, 3]}, generate_summary)
    ```

For HTTP API:
    ```python
    from response_cache.api.app import app
    ```
"""

from response_cache.config import get_redis_client, settings
from response_cache.entities import (
    Artifact,
    CacheEntryEntity,
    CacheLookupEntity,
    CacheStatsEntity,
    ModeStatsEntity,
    RequestDescriptor,
    UsageInfo,
)
from response_cache.exceptions import (
    CacheUnavailableError,
    MalformedDescriptorError,
    ResponseCacheError,
)
from response_cache.handlers import CacheHandler
from response_cache.keys import canonicalize, compute_fingerprint, resolve_model_hint
from response_cache.protocols import ResponseCacheStore
from response_cache.repositories import RedisResponseCacheRepository
from response_cache.services import CacheMetadata, InvocationResult, ResponseCacheService

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Key derivation
    "canonicalize",
    "compute_fingerprint",
    "resolve_model_hint",
    # Protocols (interfaces)
    "ResponseCacheStore",
    # Services (business logic)
    "ResponseCacheService",
    "InvocationResult",
    "CacheMetadata",
    # Handlers (HTTP)
    "CacheHandler",
    # Repositories (data access)
    "RedisResponseCacheRepository",
    # Entities (domain models)
    "Artifact",
    "UsageInfo",
    "RequestDescriptor",
    "CacheEntryEntity",
    "CacheLookupEntity",
    "CacheStatsEntity",
    "ModeStatsEntity",
    # Errors
    "ResponseCacheError",
    "CacheUnavailableError",
    "MalformedDescriptorError",
]
