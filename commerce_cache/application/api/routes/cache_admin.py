"""
Cache Administration Routes
===========================

Operational endpoints for inspecting and steering the cache:

    GET     /api/admin/cache/metrics                  current counters
    GET     /api/admin/cache/health                   availability + recommendations
    GET     /api/admin/cache/report                   human-readable performance report
    POST    /api/admin/cache/warmup                   warm frequently accessed data
    POST    /api/admin/cache/warmup/featured-products warm featured products
    POST    /api/admin/cache/warmup/analytics         warm month-to-date analytics
    DELETE  /api/admin/cache/clear                    delete every key
    DELETE  /api/admin/cache/metrics/reset            zero the counters
    POST    /api/admin/cache/configure/lru            switch to allkeys-lru eviction
    GET     /api/admin/cache/memory                   backend memory statistics

Cache-layer failures raised here (e.g. a clear that cannot enumerate keys)
surface through the application's CacheLayerError handler as 503 responses.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends

from commerce_cache.application.api.dependencies import (
    CacheClientDep,
    MonitoringServiceDep,
    WarmingServiceDep,
)
from commerce_cache.application.api.models.cache import (
    CacheHealthModel,
    CacheMetricsModel,
    DataResponse,
    MessageResponse,
    PerformanceReportModel,
)
from commerce_cache.core.config.constants import CACHE_PATTERNS

logger = structlog.get_logger(__name__)


async def verify_admin_access() -> None:
    """
    Admin guard hook.

    Authentication is enforced upstream by the API gateway; this dependency is
    the seam where an in-process check would be attached.
    """


router = APIRouter(
    prefix="/api/admin/cache",
    tags=["Admin Cache Management"],
    dependencies=[Depends(verify_admin_access)],
)


# ============================================================================
# INSPECTION ENDPOINTS
# ============================================================================


@router.get("/metrics", response_model=DataResponse[CacheMetricsModel], summary="Get cache performance metrics")
async def get_cache_metrics(monitoring: MonitoringServiceDep):
    return DataResponse[CacheMetricsModel](
        data=CacheMetricsModel.from_metrics(monitoring.get_cache_metrics())
    )


@router.get("/health", response_model=DataResponse[CacheHealthModel], summary="Get cache health status")
async def get_cache_health(monitoring: MonitoringServiceDep):
    health = await monitoring.get_cache_health()
    return DataResponse[CacheHealthModel](data=CacheHealthModel(**health))


@router.get(
    "/report",
    response_model=DataResponse[PerformanceReportModel],
    summary="Generate cache performance report",
)
async def get_cache_report(monitoring: MonitoringServiceDep):
    report = await monitoring.generate_performance_report()
    return DataResponse[PerformanceReportModel](data=PerformanceReportModel(**report))


@router.get(
    "/memory",
    response_model=DataResponse[dict[str, Any] | None],
    summary="Get cache memory usage information",
)
async def get_memory_usage(cache: CacheClientDep):
    return DataResponse[dict[str, Any] | None](data=await cache.get_memory_usage())


# ============================================================================
# WARMUP ENDPOINTS
# ============================================================================


@router.post("/warmup", response_model=MessageResponse, summary="Warm up cache with frequently accessed data")
async def warmup_cache(warming: WarmingServiceDep):
    written = await warming.warmup_frequently_accessed_data()
    logger.info("Admin triggered cache warmup", written=written)
    return MessageResponse(message="Cache warmup completed successfully")


@router.post(
    "/warmup/featured-products",
    response_model=MessageResponse,
    summary="Warm up cache for featured products",
)
async def warmup_featured_products(warming: WarmingServiceDep):
    written = await warming.warmup_featured_products()
    logger.info("Admin triggered featured products warmup", written=written)
    return MessageResponse(message="Featured products cache warmup completed successfully")


@router.post("/warmup/analytics", response_model=MessageResponse, summary="Warm up cache for analytics data")
async def warmup_analytics(warming: WarmingServiceDep):
    written = await warming.warmup_analytics_data()
    logger.info("Admin triggered analytics warmup", written=written)
    return MessageResponse(message="Analytics cache warmup completed successfully")


# ============================================================================
# MAINTENANCE ENDPOINTS
# ============================================================================


@router.delete("/clear", response_model=MessageResponse, summary="Clear all cache entries")
async def clear_cache(cache: CacheClientDep):
    deleted = await cache.del_pattern(CACHE_PATTERNS.ALL)
    logger.warning("Admin cleared the cache", deleted=deleted)
    return MessageResponse(message="Cache cleared successfully")


@router.delete("/metrics/reset", response_model=MessageResponse, summary="Reset cache metrics")
async def reset_metrics(monitoring: MonitoringServiceDep):
    monitoring.reset_metrics()
    return MessageResponse(message="Cache metrics reset successfully")


@router.post("/configure/lru", response_model=MessageResponse, summary="Configure LRU eviction policy")
async def configure_lru(cache: CacheClientDep):
    if await cache.configure_lru_eviction():
        return MessageResponse(message="LRU eviction policy configured successfully")
    return MessageResponse(success=False, message="Failed to configure LRU eviction policy")
