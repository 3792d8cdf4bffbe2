"""
Cache Client

Typed facade over a CacheBackend that owns value serialization, default TTLs
and the hit/miss/error counters.

Failure semantics:
    get()            never raises; a backend error is logged, counted as an
                     error and treated as a miss
    set() / delete() raise CacheWriteError; callers decide whether to ignore it
    del_pattern()    raises CacheInvalidationError when keys cannot be
                     enumerated or deleted
    exists() / ttl() / is_available() / get_memory_usage() /
    configure_lru_eviction()
                     degrade to a neutral answer and never raise

Every call is a single attempt. There is no retry loop at this layer.

Author: Platform Engineering
Date: 2026-10-18
"""

import asyncio
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import orjson

from commerce_cache.core.config.constants import (
    HEALTH_CHECK_KEY,
    HEALTH_CHECK_TTL,
    HEALTH_CHECK_VALUE,
    Stage,
)
from commerce_cache.core.config.settings import get_settings
from commerce_cache.core.exceptions import CacheInvalidationError, CacheWriteError
from commerce_cache.core.interfaces.cache import (
    AdministrableBackend,
    CacheBackend,
    KeyEnumeratingBackend,
)
from commerce_cache.core.logging.logger import get_logger, log_stage
from commerce_cache.infrastructure.cache.metrics import CacheMetrics, MetricsRecorder

logger = get_logger(__name__)

# Keys per DEL command during pattern deletion
DELETE_BATCH_SIZE = 500


@dataclass(frozen=True)
class WarmupDescriptor:
    """One entry to pre-load: key, value and optional TTL (None = default)."""

    key: str
    value: Any
    ttl: int | None = None


def _serialize(value: Any) -> str:
    return orjson.dumps(value, default=str).decode()


def _deserialize(raw: str) -> Any:
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError:
        # Written by something other than this client
        return raw


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class CacheClient:
    """
    Cache facade used by the interceptors, the warming service and the admin API.

    Usage:
        client = CacheClient(await init_redis())

        await client.set("v1:admin:settings:all", {"currency": "USD"}, ttl=3600)
        settings = await client.get("v1:admin:settings:all")
        removed = await client.del_pattern("v1:admin:products:*")

        client.get_metrics().hit_rate
    """

    def __init__(self, backend: CacheBackend, default_ttl: int | None = None):
        self._backend = backend
        self._default_ttl = default_ttl or get_settings().cache.CACHE_DEFAULT_TTL
        self._metrics = MetricsRecorder()

        log_stage(
            logger,
            Stage.INITIALIZATION,
            "Cache client initialized",
            backend=type(backend).__name__,
            default_ttl=self._default_ttl,
            supports_patterns=isinstance(backend, KeyEnumeratingBackend),
        )

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    @property
    def default_ttl(self) -> int:
        return self._default_ttl

    def _resolve_ttl(self, ttl: int | None) -> int:
        return ttl if ttl and ttl > 0 else self._default_ttl

    # -------------------------------------------------------------------------
    # Core operations
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """
        Read a value.

        STAGE-C.1: Cache GET

        Returns:
            Deserialized value, or None on a miss or backend failure
        """
        start = time.perf_counter()
        try:
            raw = await self._backend.get(key)
        except Exception as e:
            self._metrics.record_failed_read(_elapsed_ms(start))
            log_stage(
                logger,
                Stage.CACHE_GET,
                "Cache GET failed, treating as miss",
                level="error",
                cache_key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        # A stored JSON null reads as a miss
        value = None if raw is None else _deserialize(raw)
        if value is None:
            self._metrics.record_miss(_elapsed_ms(start))
            log_stage(logger, Stage.CACHE_GET, "Cache miss", level="debug", cache_key=key)
            return None

        self._metrics.record_hit(_elapsed_ms(start))
        log_stage(logger, Stage.CACHE_GET, "Cache hit", level="debug", cache_key=key)
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """
        Write a value with a TTL in seconds (None or 0 uses the default TTL).

        STAGE-C.2: Cache SET

        Raises:
            CacheWriteError: If the backend rejects the write
        """
        effective_ttl = self._resolve_ttl(ttl)
        try:
            await self._backend.set(key, _serialize(value), effective_ttl)
        except Exception as e:
            self._metrics.record_error()
            log_stage(
                logger,
                Stage.CACHE_SET,
                "Cache SET failed",
                level="error",
                cache_key=key,
                ttl=effective_ttl,
                error=str(e),
            )
            raise CacheWriteError.from_exception(
                e, f"Cache SET failed for {key}", key=key, ttl=effective_ttl
            ) from e

        self._metrics.record_set()
        log_stage(logger, Stage.CACHE_SET, "Cache set", level="debug", cache_key=key, ttl=effective_ttl)

    async def delete(self, key: str) -> None:
        """
        Remove a single key.

        STAGE-C.3: Cache DEL

        Raises:
            CacheWriteError: If the backend rejects the delete
        """
        try:
            await self._backend.delete(key)
        except Exception as e:
            self._metrics.record_error()
            log_stage(
                logger, Stage.CACHE_DELETE, "Cache DEL failed", level="error", cache_key=key, error=str(e)
            )
            raise CacheWriteError.from_exception(e, f"Cache DEL failed for {key}", key=key) from e

        self._metrics.record_delete()
        log_stage(logger, Stage.CACHE_DELETE, "Cache key deleted", level="debug", cache_key=key)

    async def del_pattern(self, pattern: str) -> int:
        """
        Remove every key matching a glob pattern (trailing "*" wildcard).

        STAGE-C.4: Pattern delete

        Returns:
            Number of keys deleted (0 when nothing matched or the backend
            cannot enumerate keys)

        Raises:
            CacheInvalidationError: If keys cannot be enumerated or deleted
        """
        if not isinstance(self._backend, KeyEnumeratingBackend):
            log_stage(
                logger,
                Stage.CACHE_PATTERN_DELETE,
                "Pattern deletion not supported by cache backend",
                level="warning",
                pattern=pattern,
                backend=type(self._backend).__name__,
            )
            return 0

        try:
            keys = await self._backend.keys(pattern)
            deleted = 0
            for offset in range(0, len(keys), DELETE_BATCH_SIZE):
                deleted += await self._backend.delete(*keys[offset : offset + DELETE_BATCH_SIZE])
        except Exception as e:
            self._metrics.record_error()
            log_stage(
                logger,
                Stage.CACHE_PATTERN_DELETE,
                "Pattern deletion failed",
                level="error",
                pattern=pattern,
                error=str(e),
            )
            raise CacheInvalidationError.from_exception(
                e, f"Pattern deletion failed for {pattern}", pattern=pattern
            ) from e

        if deleted:
            self._metrics.record_delete(deleted)
        log_stage(
            logger,
            Stage.CACHE_PATTERN_DELETE,
            "Pattern deleted",
            level="debug",
            pattern=pattern,
            matched=len(keys),
            deleted=deleted,
        )
        return deleted

    async def exists(self, key: str) -> bool:
        """True when a non-null value is stored. Does not touch metrics."""
        try:
            return await self._backend.get(key) is not None
        except Exception as e:
            logger.warning("Cache EXISTS failed", cache_key=key, error=str(e))
            return False

    async def ttl(self, key: str) -> int:
        """
        Remaining lifetime in seconds.

        Returns -1 when the backend cannot report TTLs, when the key is missing
        or has no expiry, and on any error.
        """
        if not isinstance(self._backend, AdministrableBackend):
            logger.warning("TTL lookup not supported by cache backend", cache_key=key)
            return -1
        try:
            remaining = await self._backend.ttl(key)
        except Exception as e:
            logger.error("Cache TTL failed", cache_key=key, error=str(e))
            return -1
        return remaining if remaining >= 0 else -1

    # -------------------------------------------------------------------------
    # Backend probing and administration
    # -------------------------------------------------------------------------

    async def is_available(self) -> bool:
        """
        Round-trip check on the sentinel key (set, read back, delete).

        STAGE-C.5: Availability check

        Talks to the backend directly so availability checks never skew request metrics.
        """
        try:
            await self._backend.set(HEALTH_CHECK_KEY, HEALTH_CHECK_VALUE, HEALTH_CHECK_TTL)
            value = await self._backend.get(HEALTH_CHECK_KEY)
            await self._backend.delete(HEALTH_CHECK_KEY)
        except Exception as e:
            log_stage(
                logger,
                Stage.CACHE_PROBE,
                "Cache availability check failed",
                level="warning",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
        return value == HEALTH_CHECK_VALUE

    async def configure_lru_eviction(self) -> bool:
        """
        Switch the backend to allkeys-lru eviction.

        STAGE-C.6: Backend configuration

        Returns:
            True if the policy was applied, False otherwise (logged)
        """
        if not isinstance(self._backend, AdministrableBackend):
            log_stage(
                logger,
                Stage.CACHE_CONFIG,
                "Eviction policy configuration not supported by cache backend",
                level="warning",
            )
            return False
        try:
            await self._backend.config_set("maxmemory-policy", "allkeys-lru")
        except Exception as e:
            log_stage(
                logger, Stage.CACHE_CONFIG, "Failed to configure LRU eviction", level="error", error=str(e)
            )
            return False

        log_stage(logger, Stage.CACHE_CONFIG, "LRU eviction policy configured")
        return True

    async def get_memory_usage(self) -> dict[str, Any] | None:
        """Backend memory statistics, or None when unsupported or unavailable."""
        if not isinstance(self._backend, AdministrableBackend):
            return None
        try:
            return await self._backend.memory_info()
        except Exception as e:
            logger.error("Failed to get cache memory usage", error=str(e))
            return None

    # -------------------------------------------------------------------------
    # Bulk population
    # -------------------------------------------------------------------------

    async def warm_cache(self, entries: Iterable[WarmupDescriptor | Mapping[str, Any]]) -> int:
        """
        Write every descriptor concurrently; failures are logged one by one.

        Returns:
            Number of entries successfully written
        """
        descriptors = [
            entry if isinstance(entry, WarmupDescriptor) else WarmupDescriptor(**entry)
            for entry in entries
        ]
        log_stage(logger, Stage.WARMUP, "Starting cache warmup", entries=len(descriptors))

        results = await asyncio.gather(
            *(self.set(d.key, d.value, d.ttl) for d in descriptors),
            return_exceptions=True,
        )

        written = 0
        for descriptor, result in zip(descriptors, results):
            if isinstance(result, BaseException):
                logger.warning("Failed to warm cache entry", cache_key=descriptor.key, error=str(result))
            else:
                written += 1

        log_stage(
            logger,
            Stage.WARMUP,
            "Cache warmup completed",
            written=written,
            failed=len(descriptors) - written,
        )
        return written

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def get_metrics(self) -> CacheMetrics:
        return self._metrics.snapshot()

    def reset_metrics(self) -> None:
        self._metrics.reset()
        logger.debug("Cache metrics reset")
