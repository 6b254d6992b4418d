"""Exception hierarchy for the response cache.

Generation failures are deliberately absent: whatever the caller's
generate function raises reaches the caller unchanged.
"""


class ResponseCacheError(Exception):
    """Base class for response cache errors."""


class CacheUnavailableError(ResponseCacheError):
    """The persistence backend is unreachable, timed out, or returned an error."""


class MalformedDescriptorError(ResponseCacheError, ValueError):
    """A request context cannot be canonicalized into a stable fingerprint."""
