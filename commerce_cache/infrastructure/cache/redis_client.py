"""
Redis Client with Connection Pooling

Architecture:
    RedisClient (Public API, implements CacheBackend)
        ├── ConnectionManager (Connection lifecycle)
        └── OperationExecutor (Command execution with error handling)

Every command is attempted exactly once. Callers (CacheClient) decide how a
failure degrades; this layer only translates RedisError into CacheKeyError.

Author: Platform Engineering
Date: 2026-10-18
"""

from typing import Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from commerce_cache.core.config.settings import Settings, get_settings
from commerce_cache.core.exceptions import CacheConnectionError, CacheKeyError
from commerce_cache.core.logging.logger import get_logger

logger = get_logger(__name__)

# Fields of INFO memory surfaced by memory_info()
MEMORY_INFO_FIELDS = (
    "used_memory",
    "used_memory_human",
    "used_memory_peak",
    "used_memory_peak_human",
    "used_memory_rss",
    "maxmemory",
    "maxmemory_human",
    "maxmemory_policy",
    "mem_fragmentation_ratio",
)

SCAN_BATCH_SIZE = 500


# =============================================================================
# LAYER 1: CONNECTION MANAGEMENT
# Handles connection lifecycle and pooling
# =============================================================================


class ConnectionManager:
    """
    Manages Redis connection lifecycle and pooling.

    Pool Configuration:
    - Max connections: REDIS_MAX_CONNECTIONS
    - Socket timeouts: REDIS_SOCKET_TIMEOUT / REDIS_SOCKET_CONNECT_TIMEOUT
    - Health check interval: REDIS_HEALTH_CHECK_INTERVAL
    - Retry on timeout: disabled (single attempt per command)
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._pool: ConnectionPool | None = None
        self._client: redis.Redis | None = None
        self._is_connected = False

    async def connect(self) -> redis.Redis:
        """
        Establish connection to Redis with connection pooling.

        STAGE-REDIS.2: Connection establishment

        Returns:
            redis.Redis: Connected Redis client

        Raises:
            CacheConnectionError: If connection fails
        """
        if self._is_connected and self._client:
            return self._client

        redis_settings = self._settings.redis

        try:
            # STAGE-REDIS.2.1: Create connection pool
            self._pool = ConnectionPool(
                host=redis_settings.REDIS_HOST,
                port=redis_settings.REDIS_PORT,
                db=redis_settings.REDIS_DB,
                password=redis_settings.REDIS_PASSWORD,
                max_connections=redis_settings.REDIS_MAX_CONNECTIONS,
                socket_connect_timeout=redis_settings.REDIS_SOCKET_CONNECT_TIMEOUT,
                socket_timeout=redis_settings.REDIS_SOCKET_TIMEOUT,
                retry_on_timeout=False,
                health_check_interval=redis_settings.REDIS_HEALTH_CHECK_INTERVAL,
                decode_responses=True,
            )

            # STAGE-REDIS.2.2: Create Redis client with pool
            self._client = redis.Redis(connection_pool=self._pool)

            # STAGE-REDIS.2.3: Verify connection with ping
            await self._client.ping()

            self._is_connected = True

            logger.info(
                "Redis connected successfully",
                stage="REDIS.2",
                host=redis_settings.REDIS_HOST,
                port=redis_settings.REDIS_PORT,
                max_connections=redis_settings.REDIS_MAX_CONNECTIONS,
            )

            return self._client

        except (ConnectionError, TimeoutError) as e:
            logger.error("Failed to connect to Redis", stage="REDIS.2", error=str(e))
            raise CacheConnectionError(
                message=f"Failed to connect to Redis: {e}",
                details={
                    "host": redis_settings.REDIS_HOST,
                    "port": redis_settings.REDIS_PORT,
                },
            ) from e

    async def disconnect(self) -> None:
        """
        Close Redis connection and pool.

        STAGE-REDIS.3: Connection cleanup
        """
        if self._client:
            await self._client.aclose()

        if self._pool:
            await self._pool.disconnect()

        self._client = None
        self._pool = None
        self._is_connected = False

        logger.info("Redis disconnected", stage="REDIS.3")

    async def ping(self) -> bool:
        """Check Redis connection health."""
        try:
            if self._client and self._is_connected:
                await self._client.ping()
                return True
        except (ConnectionError, TimeoutError):
            pass
        return False

    def is_connected(self) -> bool:
        return self._is_connected


# =============================================================================
# LAYER 2: OPERATION EXECUTOR
# Executes Redis commands with error handling and logging
# =============================================================================


class OperationExecutor:
    """
    Executes Redis operations with consistent error handling.

    Error Handling Strategy:
    - Catch RedisError exceptions
    - Log error with context (stage, key, etc.)
    - Raise CacheKeyError with details, chained to the original
    """

    def __init__(self, redis_client: redis.Redis):
        self._redis = redis_client

    async def get(self, key: str) -> str | None:
        """
        Get value from Redis.

        STAGE-REDIS.GET: Redis GET operation
        """
        try:
            return await self._redis.get(key)
        except RedisError as e:
            logger.error("Redis GET failed", stage="REDIS.GET", cache_key=key, error=str(e))
            raise CacheKeyError(message=f"Redis GET failed: {e}", details={"key": key}) from e

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """
        Set value in Redis.

        STAGE-REDIS.SET: Redis SET [EX] operation

        Args:
            key: Redis key
            value: Serialized value
            ttl: Time-to-live in seconds (omitted when None)

        Returns:
            True if set successfully
        """
        try:
            result = await self._redis.set(key, value, ex=ttl)
            return result is not None
        except RedisError as e:
            logger.error("Redis SET failed", stage="REDIS.SET", cache_key=key, error=str(e))
            raise CacheKeyError(message=f"Redis SET failed: {e}", details={"key": key}) from e

    async def delete(self, *keys: str) -> int:
        """
        Delete keys from Redis.

        STAGE-REDIS.DEL: Redis DEL operation

        Returns:
            Number of keys deleted
        """
        if not keys:
            return 0
        try:
            return await self._redis.delete(*keys)
        except RedisError as e:
            logger.error("Redis DELETE failed", stage="REDIS.DEL", keys=keys, error=str(e))
            raise CacheKeyError(message=f"Redis DELETE failed: {e}", details={"keys": keys}) from e

    async def keys(self, pattern: str) -> list[str]:
        """
        Enumerate keys matching a glob pattern.

        STAGE-REDIS.SCAN: cursor-based SCAN MATCH, never the blocking KEYS command
        """
        try:
            return [key async for key in self._redis.scan_iter(match=pattern, count=SCAN_BATCH_SIZE)]
        except RedisError as e:
            logger.error("Redis SCAN failed", stage="REDIS.SCAN", pattern=pattern, error=str(e))
            raise CacheKeyError(
                message=f"Redis SCAN failed: {e}", details={"pattern": pattern}
            ) from e

    async def ttl(self, key: str) -> int:
        """
        Get TTL of a key.

        Returns:
            TTL in seconds, -1 if no TTL, -2 if key doesn't exist
        """
        try:
            return await self._redis.ttl(key)
        except RedisError as e:
            logger.error("Redis TTL failed", stage="REDIS.TTL", cache_key=key, error=str(e))
            raise CacheKeyError(message=f"Redis TTL failed: {e}", details={"key": key}) from e

    async def config_set(self, name: str, value: str) -> bool:
        """
        Apply a runtime configuration parameter.

        STAGE-REDIS.CONFIG: CONFIG SET
        """
        try:
            return bool(await self._redis.config_set(name, value))
        except RedisError as e:
            logger.error(
                "Redis CONFIG SET failed",
                stage="REDIS.CONFIG",
                parameter=name,
                error=str(e),
            )
            raise CacheKeyError(
                message=f"Redis CONFIG SET failed: {e}",
                details={"parameter": name, "value": value},
            ) from e

    async def memory_info(self) -> dict[str, Any]:
        """
        Memory statistics from INFO memory.

        Returns:
            Subset of the INFO memory section (see MEMORY_INFO_FIELDS)
        """
        try:
            info = await self._redis.info("memory")
        except RedisError as e:
            logger.error("Redis INFO failed", stage="REDIS.INFO", error=str(e))
            raise CacheKeyError(
                message=f"Redis INFO failed: {e}", details={"section": "memory"}
            ) from e
        return {field: info[field] for field in MEMORY_INFO_FIELDS if field in info}


# =============================================================================
# LAYER 3: PUBLIC API
# Clean interface that coordinates all layers
# =============================================================================


class RedisClient:
    """
    Async Redis client with connection pooling.

    Satisfies CacheBackend, KeyEnumeratingBackend and AdministrableBackend,
    so CacheClient can use every capability against it.

    Usage:
        client = RedisClient()
        await client.connect()

        await client.set("v1:admin:settings:all", '{"currency":"USD"}', ttl=3600)
        value = await client.get("v1:admin:settings:all")
        keys = await client.keys("v1:admin:products:*")

        await client.disconnect()
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize Redis client.

        STAGE-REDIS.1: Client initialization
        """
        self._settings = settings or get_settings()

        self._conn_mgr = ConnectionManager(self._settings)
        self._executor: OperationExecutor | None = None

        logger.info(
            "Redis client initialized",
            stage="REDIS.1",
            host=self._settings.redis.REDIS_HOST,
            port=self._settings.redis.REDIS_PORT,
        )

    async def connect(self) -> None:
        """
        Establish connection to Redis.

        Raises:
            CacheConnectionError: If connection fails
        """
        client = await self._conn_mgr.connect()
        self._executor = OperationExecutor(client)

    async def disconnect(self) -> None:
        await self._conn_mgr.disconnect()
        self._executor = None

    async def ping(self) -> bool:
        return await self._conn_mgr.ping()

    @property
    def is_connected(self) -> bool:
        return self._conn_mgr.is_connected()

    def _require_executor(self) -> OperationExecutor:
        if self._executor is None:
            raise CacheConnectionError(
                message="Redis client is not connected",
                details={
                    "host": self._settings.redis.REDIS_HOST,
                    "port": self._settings.redis.REDIS_PORT,
                },
            )
        return self._executor

    # -------------------------------------------------------------------------
    # Delegate to OperationExecutor
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> str | None:
        return await self._require_executor().get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        return await self._require_executor().set(key, value, ttl)

    async def delete(self, *keys: str) -> int:
        return await self._require_executor().delete(*keys)

    async def keys(self, pattern: str) -> list[str]:
        return await self._require_executor().keys(pattern)

    async def ttl(self, key: str) -> int:
        return await self._require_executor().ttl(key)

    async def config_set(self, name: str, value: str) -> bool:
        return await self._require_executor().config_set(name, value)

    async def memory_info(self) -> dict[str, Any]:
        return await self._require_executor().memory_info()


# =============================================================================
# GLOBAL INSTANCE (SINGLETON PATTERN)
# =============================================================================

_redis_client: RedisClient | None = None


def get_redis_client() -> RedisClient:
    """
    Get the global Redis client instance (singleton).

    Returns:
        RedisClient: Global Redis client instance
    """
    global _redis_client

    if _redis_client is None:
        _redis_client = RedisClient()

    return _redis_client


async def init_redis() -> RedisClient:
    """
    Initialize and connect the global Redis client.

    Returns:
        RedisClient: Connected Redis client
    """
    client = get_redis_client()
    await client.connect()
    return client


async def close_redis() -> None:
    """Close the global Redis client."""
    global _redis_client

    if _redis_client:
        await _redis_client.disconnect()
        _redis_client = None
