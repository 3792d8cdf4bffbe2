"""
Cache Key Generator

Builds deterministic, versioned cache keys from a namespace prefix and a
parameter map:

    {version}:{prefix}[:{name}={value}]*

Parameters are sorted by name so the same logical query always maps to the
same key regardless of argument order. None values are dropped. Value
rendering:

    list / tuple        comma-joined (None items render as empty strings)
    set / frozenset     comma-joined in sorted order
    bool                true / false
    date / datetime     ISO 8601
    Enum                its value
    mapping, dataclass,
    pydantic model      canonical JSON (sorted keys, compact)
    anything else       str()

Key generation never raises. A value orjson cannot encode falls back to str().

Author: Platform Engineering
Date: 2026-10-18
"""

import dataclasses
from collections.abc import Mapping
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

import orjson
from pydantic import BaseModel

from commerce_cache.core.config.constants import DEFAULT_KEY_VERSION, KEY_SEPARATOR

_JSON_OPTIONS = orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS


def _to_json(value: Any) -> str:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    try:
        return orjson.dumps(value, default=str, option=_JSON_OPTIONS).decode()
    except (orjson.JSONEncodeError, TypeError):
        return str(value)


def _render_item(item: Any) -> str:
    return "" if item is None else render_value(item)


def render_value(value: Any) -> str:
    """Render a single parameter value as it appears in a key segment."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return render_value(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join(_render_item(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return ",".join(sorted(_render_item(item) for item in value))
    if isinstance(value, (Mapping, BaseModel)) or (
        dataclasses.is_dataclass(value) and not isinstance(value, type)
    ):
        return _to_json(value)
    return str(value)


def _as_day(value: date | datetime) -> str:
    """YYYY-MM-DD; aware datetimes are normalised to UTC first."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    return value.isoformat()


class CacheKeyGenerator:
    """
    Stateless key builder (apart from its default schema version).

    Usage:
        keys = CacheKeyGenerator()
        keys.generate_key("admin:users", {"page": 1, "limit": 10, "search": "john"})
        # "v1:admin:users:limit=10:page=1:search=john"
    """

    def __init__(self, default_version: str = DEFAULT_KEY_VERSION, separator: str = KEY_SEPARATOR):
        self._default_version = default_version
        self._separator = separator

    @property
    def default_version(self) -> str:
        return self._default_version

    def _base(self, prefix: str, version: str | None) -> str:
        return f"{version or self._default_version}{self._separator}{prefix}"

    def generate_key(
        self, prefix: str, params: Mapping[str, Any] | None = None, version: str | None = None
    ) -> str:
        """
        Build a key from a prefix and a parameter map.

        Args:
            prefix: Namespace, e.g. "admin:users"
            params: Parameters identifying the query (order irrelevant)
            version: Schema version override (defaults to the generator's)

        Returns:
            "{version}:{prefix}" followed by ":name=value" per non-None param
        """
        parts = [self._base(prefix, version)]
        for name in sorted(params or {}, key=str):
            value = params[name]
            if value is None:
                continue
            parts.append(f"{name}={render_value(value)}")
        return self._separator.join(parts)

    def generate_simple_key(self, prefix: str, id: str | int, version: str | None = None) -> str:
        """Key for a single entity: "{version}:{prefix}:{id}"."""
        return f"{self._base(prefix, version)}{self._separator}{id}"

    def generate_list_key(
        self,
        prefix: str,
        page: int = 1,
        limit: int = 10,
        filters: Mapping[str, Any] | None = None,
        version: str | None = None,
    ) -> str:
        """Key for a paginated list; filters are merged with page/limit."""
        params: dict[str, Any] = {"page": page, "limit": limit}
        params.update(filters or {})
        return self.generate_key(prefix, params, version)

    def generate_analytics_key(
        self,
        prefix: str,
        date_from: date | datetime | None = None,
        date_to: date | datetime | None = None,
        interval: str | None = None,
        version: str | None = None,
    ) -> str:
        """Key for a date-ranged analytics query; absent bounds are omitted."""
        params: dict[str, Any] = {}
        if date_from:
            params["from"] = _as_day(date_from)
        if date_to:
            params["to"] = _as_day(date_to)
        if interval:
            params["interval"] = interval
        return self.generate_key(prefix, params, version)

    def generate_pattern_key(self, prefix: str, pattern: str, version: str | None = None) -> str:
        """Glob pattern for invalidation: "{version}:{prefix}:{pattern}"."""
        return f"{self._base(prefix, version)}{self._separator}{pattern}"
