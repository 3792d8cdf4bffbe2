"""
Application Services Package
=============================

Cache-facing services used by the admin API and by application startup.

- **CacheWarmingService**: pre-loads hot payloads, on demand and periodically
- **CacheMonitoringService**: metrics, health, recommendations, periodic logging
- **StaticDataSource**: seedable in-memory DataSource

Services receive their collaborators (CacheClient, DataSource) through the
constructor and keep no per-request state.
"""

from .data_sources import StaticDataSource
from .monitoring_service import CacheMonitoringService, generate_recommendations
from .warming_service import CacheWarmingService

__all__ = [
    "CacheMonitoringService",
    "CacheWarmingService",
    "StaticDataSource",
    "generate_recommendations",
]
