"""
Unit Tests for the Redis Adapter

Exercises OperationExecutor and RedisClient against a mocked redis.asyncio
client. No Redis server is required.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from commerce_cache.core.exceptions import CacheConnectionError, CacheKeyError
from commerce_cache.core.interfaces.cache import (
    AdministrableBackend,
    CacheBackend,
    KeyEnumeratingBackend,
)
from commerce_cache.infrastructure.cache.redis_client import (
    SCAN_BATCH_SIZE,
    OperationExecutor,
    RedisClient,
)


@pytest.fixture
def mock_redis():
    """Mocked redis.asyncio.Redis with async commands."""
    client = MagicMock()
    client.get = AsyncMock(return_value='{"a":1}')
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=2)
    client.ttl = AsyncMock(return_value=42)
    client.config_set = AsyncMock(return_value=True)
    client.info = AsyncMock(
        return_value={
            "used_memory": 1024,
            "used_memory_human": "1.00K",
            "maxmemory_policy": "allkeys-lru",
            "allocator_frag_bytes": 7,
        }
    )
    return client


@pytest.fixture
def executor(mock_redis) -> OperationExecutor:
    return OperationExecutor(mock_redis)


@pytest.mark.unit
class TestOperationExecutor:
    """Command translation and error mapping."""

    @pytest.mark.asyncio
    async def test_get(self, executor, mock_redis):
        assert await executor.get("k") == '{"a":1}'
        mock_redis.get.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_set_passes_ttl_as_ex(self, executor, mock_redis):
        assert await executor.set("k", "v", 60) is True
        mock_redis.set.assert_awaited_once_with("k", "v", ex=60)

    @pytest.mark.asyncio
    async def test_delete_many(self, executor, mock_redis):
        assert await executor.delete("a", "b") == 2
        mock_redis.delete.assert_awaited_once_with("a", "b")

    @pytest.mark.asyncio
    async def test_delete_nothing_skips_command(self, executor, mock_redis):
        assert await executor.delete() == 0
        mock_redis.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_keys_uses_scan(self, executor, mock_redis):
        async def scan_iter(match=None, count=None):
            for key in ("v1:admin:users:1", "v1:admin:users:2"):
                yield key

        mock_redis.scan_iter = MagicMock(side_effect=scan_iter)

        assert await executor.keys("v1:admin:users:*") == ["v1:admin:users:1", "v1:admin:users:2"]
        mock_redis.scan_iter.assert_called_once_with(match="v1:admin:users:*", count=SCAN_BATCH_SIZE)

    @pytest.mark.asyncio
    async def test_memory_info_is_filtered(self, executor, mock_redis):
        info = await executor.memory_info()

        assert info == {
            "used_memory": 1024,
            "used_memory_human": "1.00K",
            "maxmemory_policy": "allkeys-lru",
        }
        mock_redis.info.assert_awaited_once_with("memory")

    @pytest.mark.asyncio
    async def test_config_set(self, executor, mock_redis):
        assert await executor.config_set("maxmemory-policy", "allkeys-lru") is True
        mock_redis.config_set.assert_awaited_once_with("maxmemory-policy", "allkeys-lru")

    @pytest.mark.asyncio
    async def test_ttl(self, executor):
        assert await executor.ttl("k") == 42

    @pytest.mark.asyncio
    async def test_redis_error_becomes_cache_key_error(self, executor, mock_redis):
        mock_redis.get.side_effect = RedisError("READONLY")

        with pytest.raises(CacheKeyError) as exc_info:
            await executor.get("k")

        assert exc_info.value.details == {"key": "k"}
        assert isinstance(exc_info.value.__cause__, RedisError)

    @pytest.mark.asyncio
    async def test_scan_error_becomes_cache_key_error(self, executor, mock_redis):
        mock_redis.scan_iter = MagicMock(side_effect=RedisConnectionError("connection reset"))

        with pytest.raises(CacheKeyError) as exc_info:
            await executor.keys("v1:*")

        assert exc_info.value.details == {"pattern": "v1:*"}


@pytest.mark.unit
class TestRedisClient:
    """Public adapter behaviour without a server."""

    def test_satisfies_backend_protocols(self, mock_settings):
        client = RedisClient(mock_settings)

        assert isinstance(client, CacheBackend)
        assert isinstance(client, KeyEnumeratingBackend)
        assert isinstance(client, AdministrableBackend)

    @pytest.mark.asyncio
    async def test_commands_before_connect_raise_connection_error(self, mock_settings):
        client = RedisClient(mock_settings)

        with pytest.raises(CacheConnectionError):
            await client.get("k")

        assert client.is_connected is False

    @pytest.mark.asyncio
    async def test_ping_without_connection_is_false(self, mock_settings):
        assert await RedisClient(mock_settings).ping() is False

    @pytest.mark.asyncio
    async def test_commands_delegate_to_executor(self, mock_settings, mock_redis):
        client = RedisClient(mock_settings)
        client._executor = OperationExecutor(mock_redis)

        await client.set("k", "v", 10)
        assert await client.get("k") == '{"a":1}'
        assert await client.delete("k") == 2
