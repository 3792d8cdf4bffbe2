"""
Unit Tests for Constants

Tests the TTL table, key prefixes, invalidation patterns and stage enum.
"""

import fnmatch

import pytest

from commerce_cache.core.config.constants import (
    CACHE_KEYS,
    CACHE_PATTERNS,
    CACHE_TTL,
    DEFAULT_KEY_VERSION,
    LOW_HIT_RATE_PCT,
    TARGET_HIT_RATE_PCT,
    Stage,
)
from commerce_cache.infrastructure.cache.key_generator import CacheKeyGenerator


def _public_values(namespace):
    return {name: value for name, value in vars(namespace).items() if name.isupper()}


@pytest.mark.unit
class TestTTLTable:
    """Test per-resource TTL values."""

    def test_all_ttls_positive(self):
        assert all(ttl > 0 for ttl in _public_values(CACHE_TTL).values())

    def test_reference_values(self):
        assert CACHE_TTL.DASHBOARD_METRICS == 300
        assert CACHE_TTL.PRODUCT_DETAILS == 1800
        assert CACHE_TTL.SYSTEM_SETTINGS == 3600

    def test_volatile_data_expires_sooner_than_reference_data(self):
        assert CACHE_TTL.DASHBOARD_METRICS < CACHE_TTL.CATEGORY_TREE < CACHE_TTL.SYSTEM_SETTINGS


@pytest.mark.unit
class TestKeysAndPatterns:
    """Test that every prefix is covered by its invalidation pattern."""

    def test_prefixes_are_admin_namespaced(self):
        assert all(prefix.startswith("admin:") for prefix in _public_values(CACHE_KEYS).values())

    def test_patterns_match_generated_keys(self):
        keys = CacheKeyGenerator()
        coverage = {
            CACHE_PATTERNS.USERS: CACHE_KEYS.USER_LIST,
            CACHE_PATTERNS.PRODUCTS: CACHE_KEYS.PRODUCT_DETAILS,
            CACHE_PATTERNS.CATEGORIES: CACHE_KEYS.CATEGORY_TREE,
            CACHE_PATTERNS.ORDERS: CACHE_KEYS.ORDER_ANALYTICS,
            CACHE_PATTERNS.DASHBOARD: CACHE_KEYS.DASHBOARD_METRICS,
            CACHE_PATTERNS.SETTINGS: CACHE_KEYS.SYSTEM_SETTINGS,
        }

        for pattern, prefix in coverage.items():
            key = keys.generate_simple_key(prefix, "x")
            assert fnmatch.fnmatchcase(key, pattern), (pattern, key)
            assert fnmatch.fnmatchcase(key, CACHE_PATTERNS.ALL_ADMIN)

    def test_patterns_carry_key_version(self):
        for name, pattern in _public_values(CACHE_PATTERNS).items():
            if name != "ALL":
                assert pattern.startswith(f"{DEFAULT_KEY_VERSION}:admin:")
                assert pattern.endswith("*")

    def test_products_pattern_does_not_match_users(self):
        key = CacheKeyGenerator().generate_simple_key(CACHE_KEYS.USER_DETAILS, "u-1")

        assert not fnmatch.fnmatchcase(key, CACHE_PATTERNS.PRODUCTS)


@pytest.mark.unit
class TestStageEnum:
    """Test stage identifiers."""

    def test_stage_values_are_unique(self):
        values = [stage.value for stage in Stage]
        assert len(values) == len(set(values))

    def test_stage_is_string_enum(self):
        assert Stage.CACHE_GET == "C.1_CACHE_GET"


@pytest.mark.unit
class TestThresholds:
    def test_low_hit_rate_below_target(self):
        assert 0 < LOW_HIT_RATE_PCT < TARGET_HIT_RATE_PCT <= 100
