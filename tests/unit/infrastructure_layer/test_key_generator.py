"""
Unit Tests for CacheKeyGenerator

Verifies deterministic, versioned key construction and value rendering.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum

import pytest
from pydantic import BaseModel

from commerce_cache.core.config.constants import CACHE_KEYS
from commerce_cache.infrastructure.cache.key_generator import CacheKeyGenerator, render_value


class Status(str, Enum):
    ACTIVE = "active"


@dataclass
class PageQuery:
    page: int
    limit: int


class ProductFilter(BaseModel):
    status: str
    min_price: float


@pytest.mark.unit
class TestGenerateKey:
    """Test suite for generate_key."""

    def test_sorts_params_and_prefixes_version(self, key_generator):
        key = key_generator.generate_key("admin:users", {"page": 1, "limit": 10, "search": "john"})

        assert key == "v1:admin:users:limit=10:page=1:search=john"

    def test_empty_params_yield_bare_prefix(self, key_generator):
        assert key_generator.generate_key("admin:users", {}) == "v1:admin:users"
        assert key_generator.generate_key("admin:users") == "v1:admin:users"

    def test_param_order_does_not_matter(self, key_generator):
        first = key_generator.generate_key("admin:users", {"page": 1, "limit": 10, "search": "john"})
        second = key_generator.generate_key("admin:users", {"search": "john", "limit": 10, "page": 1})

        assert first == second

    def test_none_values_are_dropped(self, key_generator):
        key = key_generator.generate_key("admin:users", {"page": 1, "search": None})

        assert key == "v1:admin:users:page=1"

    def test_list_values_are_comma_joined(self, key_generator):
        key = key_generator.generate_key("admin:products", {"categories": ["electronics", "books"]})

        assert key == "v1:admin:products:categories=electronics,books"

    def test_mapping_values_use_canonical_json(self, key_generator):
        first = key_generator.generate_key("admin:users", {"filters": {"status": "active", "role": "admin"}})
        second = key_generator.generate_key("admin:users", {"filters": {"role": "admin", "status": "active"}})

        assert first == 'v1:admin:users:filters={"role":"admin","status":"active"}'
        assert first == second

    def test_version_override(self, key_generator):
        key = key_generator.generate_key("admin:users", {"page": 2}, version="v2")

        assert key == "v2:admin:users:page=2"

    def test_default_version_is_configurable(self):
        generator = CacheKeyGenerator(default_version="v7")

        assert generator.generate_key("admin:users", {"page": 1}) == "v7:admin:users:page=1"
        assert generator.default_version == "v7"

    def test_unsupported_values_fall_back_to_str(self, key_generator):
        class Opaque:
            def __str__(self):
                return "opaque"

        key = key_generator.generate_key("admin:misc", {"thing": Opaque()})

        assert key == "v1:admin:misc:thing=opaque"


@pytest.mark.unit
class TestRenderValue:
    """Value rendering rules for key segments."""

    def test_bool_renders_lowercase(self):
        assert render_value(True) == "true"
        assert render_value(False) == "false"

    def test_dates_render_iso(self):
        assert render_value(date(2024, 3, 1)) == "2024-03-01"
        assert render_value(datetime(2024, 3, 1, 12, 30)) == "2024-03-01T12:30:00"

    def test_sets_render_sorted(self):
        assert render_value({"b", "c", "a"}) == "a,b,c"

    def test_none_list_items_render_empty(self):
        assert render_value(["a", None, "b"]) == "a,,b"

    def test_enum_renders_its_value(self):
        assert render_value(Status.ACTIVE) == "active"

    def test_dataclass_renders_as_json(self):
        assert render_value(PageQuery(page=2, limit=20)) == '{"limit":20,"page":2}'

    def test_pydantic_model_renders_as_json(self):
        rendered = render_value(ProductFilter(status="active", min_price=10.5))

        assert rendered == '{"min_price":10.5,"status":"active"}'


@pytest.mark.unit
class TestSpecializedKeys:
    """Simple, list, analytics and pattern keys."""

    def test_simple_key_with_string_id(self, key_generator):
        assert key_generator.generate_simple_key("admin:user", "user-123") == "v1:admin:user:user-123"

    def test_simple_key_with_numeric_id(self, key_generator):
        assert key_generator.generate_simple_key("admin:product", 456) == "v1:admin:product:456"

    def test_list_key_merges_filters(self, key_generator):
        key = key_generator.generate_list_key("admin:users:list", 2, 20, {"status": "active"})

        assert key == "v1:admin:users:list:limit=20:page=2:status=active"

    def test_list_key_defaults(self, key_generator):
        assert key_generator.generate_list_key("admin:users:list") == "v1:admin:users:list:limit=10:page=1"

    def test_analytics_key_with_full_range(self, key_generator):
        key = key_generator.generate_analytics_key(
            CACHE_KEYS.SALES_ANALYTICS, date(2023, 1, 1), date(2023, 1, 31), "day"
        )

        assert key == "v1:admin:sales:analytics:from=2023-01-01:interval=day:to=2023-01-31"

    def test_analytics_key_without_bounds(self, key_generator):
        assert key_generator.generate_analytics_key(CACHE_KEYS.SALES_ANALYTICS) == "v1:admin:sales:analytics"

    def test_analytics_key_with_partial_range(self, key_generator):
        key = key_generator.generate_analytics_key(CACHE_KEYS.SALES_ANALYTICS, date(2023, 1, 1))

        assert key == "v1:admin:sales:analytics:from=2023-01-01"

    def test_analytics_key_normalises_aware_datetimes_to_utc(self, key_generator):
        late_evening = datetime(2023, 1, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))

        key = key_generator.generate_analytics_key(CACHE_KEYS.SALES_ANALYTICS, late_evening)

        assert key == "v1:admin:sales:analytics:from=2023-01-02"

    def test_pattern_key(self, key_generator):
        assert key_generator.generate_pattern_key("admin:users", "*") == "v1:admin:users:*"
