"""
Cache Module

Redis backend adapter, key generation, the metered cache client and the
read-through / invalidation interceptors.
"""

from .cache_client import CacheClient, WarmupDescriptor
from .interceptors import CacheInterceptor, CacheOptions, InvalidationSpec, OperationRegistry
from .key_generator import CacheKeyGenerator
from .metrics import CacheMetrics
from .redis_client import RedisClient, close_redis, get_redis_client, init_redis

__all__ = [
    "CacheClient",
    "CacheInterceptor",
    "CacheKeyGenerator",
    "CacheMetrics",
    "CacheOptions",
    "InvalidationSpec",
    "OperationRegistry",
    "RedisClient",
    "WarmupDescriptor",
    "get_redis_client",
    "init_redis",
    "close_redis",
]
