"""
FastAPI Dependency Injection Module
===================================

Route handlers receive the cache client and the cache services through
FastAPI's DI system. The instances are built once in the application lifespan
and stored on app.state; tests either populate app.state directly or use
app.dependency_overrides.

Example:
    @router.get("/metrics")
    async def metrics(monitoring: MonitoringServiceDep):
        return monitoring.get_cache_metrics()
"""

from typing import Annotated

from fastapi import Depends, Request

from commerce_cache.application.services.monitoring_service import CacheMonitoringService
from commerce_cache.application.services.warming_service import CacheWarmingService
from commerce_cache.core.exceptions import ConfigurationError
from commerce_cache.infrastructure.cache.cache_client import CacheClient


def _from_state(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise ConfigurationError(
            f"'{name}' is not initialized on the application state",
            details={"component": name},
        )
    return component


def get_cache_client(request: Request) -> CacheClient:
    """CacheClient built during startup."""
    return _from_state(request, "cache_client")


def get_monitoring_service(request: Request) -> CacheMonitoringService:
    return _from_state(request, "monitoring_service")


def get_warming_service(request: Request) -> CacheWarmingService:
    return _from_state(request, "warming_service")


# ============================================================================
# TYPE ALIASES FOR CLEANER ROUTE SIGNATURES
# ============================================================================

CacheClientDep = Annotated[CacheClient, Depends(get_cache_client)]
MonitoringServiceDep = Annotated[CacheMonitoringService, Depends(get_monitoring_service)]
WarmingServiceDep = Annotated[CacheWarmingService, Depends(get_warming_service)]
