"""
Cache Backend Protocols

Abstract protocols for the key-value store sitting behind CacheClient,
enabling dependency injection and testability.

Architectural Decision: Protocol-based abstraction
- RedisClient is the production implementation
- Tests inject an in-memory fake
- Optional capabilities (key enumeration, TTL lookup, configuration) are
  separate protocols so CacheClient can degrade when a store lacks them

Author: Platform Engineering
Date: 2026-10-18
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """
    Minimum interface every cache store must provide.

    Values are already-serialized strings; CacheClient owns serialization.
    """

    async def get(self, key: str) -> str | None:
        """
        Get value from the store.

        Returns:
            Stored value or None if not found

        Raises:
            CacheKeyError: If the command fails
        """
        ...

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """
        Set value with an optional TTL in seconds.

        Raises:
            CacheKeyError: If the command fails
        """
        ...

    async def delete(self, *keys: str) -> int:
        """
        Delete keys.

        Returns:
            Number of keys deleted
        """
        ...


@runtime_checkable
class KeyEnumeratingBackend(Protocol):
    """Store able to list keys matching a glob pattern (KEYS / SCAN MATCH)."""

    async def keys(self, pattern: str) -> list[str]:
        """Return all keys matching the glob pattern."""
        ...


@runtime_checkable
class AdministrableBackend(Protocol):
    """Store exposing TTL lookup, runtime configuration and memory statistics."""

    async def ttl(self, key: str) -> int:
        """Remaining TTL in seconds (-1 no expiry, -2 missing key)."""
        ...

    async def config_set(self, name: str, value: str) -> bool:
        """Apply a runtime configuration parameter (CONFIG SET)."""
        ...

    async def memory_info(self) -> dict[str, Any]:
        """Return memory statistics (INFO memory)."""
        ...
