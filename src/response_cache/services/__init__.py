"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from response_cache.services import ResponseCacheService

    cache = ResponseCacheService.create(repository=repo)
    result = await cache.invoke("quiz", {"topicId": 7}, generate_quiz)
    ```
"""

from .cache_service import CacheMetadata, GenerateFn, InvocationResult, ResponseCacheService

__all__ = [
    "CacheMetadata",
    "GenerateFn",
    "InvocationResult",
    "ResponseCacheService",
]
