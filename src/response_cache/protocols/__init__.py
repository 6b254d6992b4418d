"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → PostgreSQL, in-memory, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from response_cache.protocols import ResponseCacheStore

    # Type hints work with any implementation
    store: ResponseCacheStore = RedisResponseCacheRepository()
    ```
"""

from .cache_store import ResponseCacheStore

__all__ = [
    "ResponseCacheStore",
]
