"""
Exception Module

Structured exception hierarchy for the caching layer.

Module Structure:
-----------------
- **base.py**: CacheLayerError base class + ConfigurationError
- **cache.py**: Store, write, invalidation and registry exceptions

Usage:
------
```python
from commerce_cache.core.exceptions import CacheWriteError, CacheInvalidationError
```
"""

from commerce_cache.core.exceptions.base import CacheLayerError, ConfigurationError
from commerce_cache.core.exceptions.cache import (
    CacheConnectionError,
    CacheError,
    CacheInvalidationError,
    CacheKeyError,
    CacheWriteError,
    OperationNotRegisteredError,
)

__all__ = [
    # Base
    "CacheLayerError",
    "ConfigurationError",
    # Cache
    "CacheError",
    "CacheConnectionError",
    "CacheKeyError",
    "CacheWriteError",
    "CacheInvalidationError",
    # Registry
    "OperationNotRegisteredError",
]
