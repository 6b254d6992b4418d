"""Repository layer for data access.

This layer abstracts the persistence backend behind the protocol-based
ResponseCacheStore interface. This enables:
- Easy swapping of implementations (Redis → PostgreSQL, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from response_cache.protocols import ResponseCacheStore

from .redis_repository import RedisResponseCacheRepository

__all__ = [
    "ResponseCacheStore",
    "RedisResponseCacheRepository",
]
