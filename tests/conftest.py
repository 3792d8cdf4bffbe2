"""
Pytest Configuration and Shared Test Fixtures

This module provides reusable fixtures for all tests. All fixtures defined
here are automatically available to all test files.
"""

from unittest.mock import MagicMock

import pytest

from commerce_cache.core.config.settings import Settings
from commerce_cache.infrastructure.cache.cache_client import CacheClient
from commerce_cache.infrastructure.cache.interceptors import CacheInterceptor
from commerce_cache.infrastructure.cache.key_generator import CacheKeyGenerator
from tests.test_fixtures.cache_factory import (
    BasicCacheBackend,
    CacheTestFactory,
    InMemoryCacheBackend,
)

# ============================================================================
# Mock Configuration Fixtures
# ============================================================================


@pytest.fixture
def mock_settings():
    """
    Mock application settings for testing.

    Returns a MagicMock with the cache settings the services read.
    """
    settings = MagicMock(spec=Settings)

    settings.cache.CACHE_DEFAULT_TTL = 300
    settings.cache.CACHE_KEY_VERSION = "v1"
    settings.cache.CACHE_WARMUP_INTERVAL_SECONDS = 0.01
    settings.cache.CACHE_ANALYTICS_WARMUP_INTERVAL_SECONDS = 0.01
    settings.cache.CACHE_MONITORING_INTERVAL_SECONDS = 0.01

    settings.app.ENVIRONMENT = "development"
    settings.app.APP_VERSION = "1.0.0-test"
    settings.app.APP_NAME = "Commerce Cache Test"

    return settings


# ============================================================================
# Cache Backend Fixtures
# ============================================================================


@pytest.fixture
def in_memory_backend() -> InMemoryCacheBackend:
    """In-memory Redis stand-in supporting every backend capability."""
    return CacheTestFactory.in_memory_backend()


@pytest.fixture
def basic_backend() -> BasicCacheBackend:
    """Backend without key enumeration, TTL lookup or configuration."""
    return CacheTestFactory.basic_backend()


@pytest.fixture
def failing_backend():
    """Backend whose every command raises CacheKeyError."""
    return CacheTestFactory.failing_backend()


# ============================================================================
# Cache Layer Fixtures
# ============================================================================


@pytest.fixture
def key_generator() -> CacheKeyGenerator:
    return CacheKeyGenerator()


@pytest.fixture
def cache_client(in_memory_backend) -> CacheClient:
    """CacheClient over the in-memory backend with a 300s default TTL."""
    return CacheTestFactory.cache_client(in_memory_backend)


@pytest.fixture
def interceptor(cache_client, key_generator) -> CacheInterceptor:
    return CacheInterceptor(cache_client, key_generator)


@pytest.fixture
def data_source():
    """Seeded StaticDataSource with one known user and two featured products."""
    return CacheTestFactory.data_source(
        users={"u-1": {"id": "u-1", "name": "Ada", "tier": "gold"}},
        featured_products=[
            {"id": "p-1", "name": "Headphones", "price": 99.0},
            {"id": "p-2", "name": "Keyboard", "price": 49.0},
        ],
    )
