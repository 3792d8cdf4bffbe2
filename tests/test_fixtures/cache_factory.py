"""
Cache Test Factory

Creates cache backends, clients and data sources with various behaviours
for testing.
"""

import fnmatch
import time
from typing import Any

from commerce_cache.application.services.data_sources import StaticDataSource
from commerce_cache.core.exceptions import CacheKeyError
from commerce_cache.infrastructure.cache.cache_client import CacheClient


ALL_OPERATIONS = ("get", "set", "delete", "keys", "ttl", "config_set", "memory_info")


class InMemoryCacheBackend:
    """
    In-memory stand-in for RedisClient.

    Supports every backend capability (get/set/delete, SCAN-style key
    enumeration, TTL, CONFIG SET, INFO memory). Individual operations can be
    made to fail through fail_on.
    """

    def __init__(self, initial_data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial_data or {})
        self.expiry: dict[str, float] = {}
        self.config: dict[str, str] = {}
        self.fail_on: set[str] = set()
        self.calls: list[tuple[str, Any]] = []

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise CacheKeyError(f"Simulated {operation} failure", details={"operation": operation})

    def _evict_expired(self, key: str) -> None:
        deadline = self.expiry.get(key)
        if deadline is not None and time.monotonic() >= deadline:
            self.data.pop(key, None)
            self.expiry.pop(key, None)

    async def get(self, key: str) -> str | None:
        self.calls.append(("get", key))
        self._check("get")
        self._evict_expired(key)
        return self.data.get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        self.calls.append(("set", key))
        self._check("set")
        self.data[key] = value
        if ttl:
            self.expiry[key] = time.monotonic() + ttl
        else:
            self.expiry.pop(key, None)
        return True

    async def delete(self, *keys: str) -> int:
        self.calls.append(("delete", keys))
        self._check("delete")
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.expiry.pop(key, None)
        return removed

    async def keys(self, pattern: str) -> list[str]:
        self.calls.append(("keys", pattern))
        self._check("keys")
        for key in list(self.data):
            self._evict_expired(key)
        return [key for key in self.data if fnmatch.fnmatchcase(key, pattern)]

    async def ttl(self, key: str) -> int:
        self._check("ttl")
        self._evict_expired(key)
        if key not in self.data:
            return -2
        if key not in self.expiry:
            return -1
        return int(self.expiry[key] - time.monotonic())

    async def config_set(self, name: str, value: str) -> bool:
        self._check("config_set")
        self.config[name] = value
        return True

    async def memory_info(self) -> dict[str, Any]:
        self._check("memory_info")
        used = sum(len(key) + len(value) for key, value in self.data.items())
        return {
            "used_memory": used,
            "used_memory_human": f"{used}B",
            "maxmemory_policy": self.config.get("maxmemory-policy", "noeviction"),
        }

    def command_count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)


class BasicCacheBackend:
    """Backend with only get/set/delete: no enumeration, TTL or configuration."""

    def __init__(self):
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        self.data[key] = value
        return True

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.data.pop(key, None) is not None)


class CacheTestFactory:
    """Factory for creating cache test objects."""

    @staticmethod
    def in_memory_backend(initial_data: dict[str, str] | None = None) -> InMemoryCacheBackend:
        return InMemoryCacheBackend(initial_data)

    @staticmethod
    def basic_backend() -> BasicCacheBackend:
        return BasicCacheBackend()

    @staticmethod
    def failing_backend() -> InMemoryCacheBackend:
        """Create a fully capable backend whose every command fails."""
        backend = InMemoryCacheBackend()
        backend.fail_on.update(ALL_OPERATIONS)
        return backend

    @staticmethod
    def cache_client(backend: Any = None, default_ttl: int = 300) -> CacheClient:
        return CacheClient(backend or InMemoryCacheBackend(), default_ttl=default_ttl)

    @staticmethod
    def data_source(**overrides: Any) -> StaticDataSource:
        return StaticDataSource(**overrides)
