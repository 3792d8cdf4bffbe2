"""
Test Fixtures Package

Shared test utilities and helpers for consistent testing across all modules.
"""

from .cache_factory import BasicCacheBackend, CacheTestFactory, InMemoryCacheBackend

__all__ = ["BasicCacheBackend", "CacheTestFactory", "InMemoryCacheBackend"]
