"""
Core Interfaces

Protocols for the cache store and for the warm-up data producers.
"""

from commerce_cache.core.interfaces.cache import (
    AdministrableBackend,
    CacheBackend,
    KeyEnumeratingBackend,
)
from commerce_cache.core.interfaces.data_source import DataSource

__all__ = [
    "AdministrableBackend",
    "CacheBackend",
    "DataSource",
    "KeyEnumeratingBackend",
]
