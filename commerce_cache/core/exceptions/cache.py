"""
Cache-Related Exceptions

All exceptions related to cache store access, writes and invalidation.
"""

from commerce_cache.core.exceptions.base import CacheLayerError


class CacheError(CacheLayerError):
    """Base exception for cache-related errors."""
    pass


class CacheConnectionError(CacheError):
    """
    Raised when unable to connect to the cache store (Redis).

    Common causes:
    - Redis server is down
    - Network connectivity issues
    - Incorrect host/port configuration
    - Authentication failure
    """
    pass


class CacheKeyError(CacheError):
    """
    Raised when a single backend command fails (GET, SET, DEL, SCAN, TTL, CONFIG).
    """
    pass


class CacheWriteError(CacheError):
    """
    Raised by CacheClient.set() / CacheClient.delete() when the store rejects
    the write. Callers decide whether to ignore it.
    """
    pass


class CacheInvalidationError(CacheError):
    """Raised when keys matching a pattern cannot be enumerated or deleted."""
    pass


class OperationNotRegisteredError(CacheLayerError):
    """Raised when OperationRegistry.call() receives an unknown operation name."""
    pass
