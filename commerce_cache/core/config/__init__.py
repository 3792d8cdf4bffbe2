"""
Configuration Module

- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: TTL table, key prefixes, invalidation patterns, stage enum

Usage:
------
```python
from commerce_cache.core.config import get_settings
from commerce_cache.core.config.constants import CACHE_KEYS, CACHE_TTL

settings = get_settings()
ttl = settings.cache.CACHE_DEFAULT_TTL
```
"""

from commerce_cache.core.config.settings import Settings, get_settings, reload_settings

__all__ = ["Settings", "get_settings", "reload_settings"]
