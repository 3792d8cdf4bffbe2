#!/usr/bin/env python3
"""
FastAPI Application Entry Point

Builds the cache layer (Redis backend, CacheClient, interceptor, warming and
monitoring services), exposes the admin routes and manages timers and
background work across the application lifespan.

Author: Platform Engineering
Date: 2026-10-18
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from commerce_cache.application.api.routes.cache_admin import router as cache_admin_router
from commerce_cache.application.services.data_sources import StaticDataSource
from commerce_cache.application.services.monitoring_service import CacheMonitoringService
from commerce_cache.application.services.warming_service import CacheWarmingService
from commerce_cache.core.config.constants import HEADER_REQUEST_ID
from commerce_cache.core.config.settings import get_settings
from commerce_cache.core.exceptions import CacheConnectionError, CacheLayerError
from commerce_cache.core.interfaces.data_source import DataSource
from commerce_cache.core.logging.logger import (
    clear_request_id,
    get_logger,
    set_request_id,
    setup_logging,
)
from commerce_cache.infrastructure.cache.cache_client import CacheClient
from commerce_cache.infrastructure.cache.interceptors import CacheInterceptor, OperationRegistry
from commerce_cache.infrastructure.cache.key_generator import CacheKeyGenerator
from commerce_cache.infrastructure.cache.redis_client import close_redis, get_redis_client

logger = get_logger(__name__)


# ============================================================================
# Application Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle (startup and shutdown).

    Startup never fails because Redis is down: the cache client degrades to
    misses and the admin health endpoint reports the outage.
    """
    settings = get_settings()

    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    logger.info(
        "Starting commerce cache service",
        environment=settings.app.ENVIRONMENT,
        version=settings.app.APP_VERSION,
    )

    redis_client = get_redis_client()
    try:
        await redis_client.connect()
        logger.info("Redis connected")
    except CacheConnectionError as e:
        logger.error("Redis unavailable at startup, cache will run degraded", error=e.message)

    cache_client = CacheClient(redis_client, default_ttl=settings.cache.CACHE_DEFAULT_TTL)
    key_generator = CacheKeyGenerator(default_version=settings.cache.CACHE_KEY_VERSION)
    interceptor = CacheInterceptor(cache_client, key_generator)
    data_source: DataSource = app.state.data_source

    warming_service = CacheWarmingService(cache_client, data_source, key_generator, settings)
    monitoring_service = CacheMonitoringService(cache_client)

    app.state.cache_client = cache_client
    app.state.key_generator = key_generator
    app.state.interceptor = interceptor
    app.state.operations = OperationRegistry(interceptor)
    app.state.warming_service = warming_service
    app.state.monitoring_service = monitoring_service

    try:
        if settings.cache.CACHE_CONFIGURE_LRU_ON_STARTUP:
            await cache_client.configure_lru_eviction()

        if settings.cache.CACHE_WARM_ON_STARTUP:
            await warming_service.warmup_frequently_accessed_data()

        if settings.cache.CACHE_PERIODIC_WARMUP_ENABLED:
            warming_service.schedule_periodic_warmup()

        if settings.cache.CACHE_MONITORING_ENABLED:
            monitoring_service.start_monitoring(settings.cache.CACHE_MONITORING_INTERVAL_SECONDS)

        logger.info("Application startup complete")

        yield

    finally:
        logger.info("Shutting down application")

        warming_service.stop_periodic_warmup()
        monitoring_service.stop_monitoring()
        await interceptor.drain()
        await close_redis()

        logger.info("Application shutdown complete")


# ============================================================================
# Application Factory
# ============================================================================


def create_app(data_source: DataSource | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        data_source: Producer of warm-up payloads (defaults to StaticDataSource)

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="Read-through caching, invalidation, warming and monitoring for the commerce backend",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.data_source = data_source or StaticDataSource()

    app.include_router(cache_admin_router)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Inject a request ID into the logging context and the response headers."""
        request_id = request.headers.get(HEADER_REQUEST_ID) or str(uuid.uuid4())
        set_request_id(request_id)

        try:
            response = await call_next(request)
            response.headers[HEADER_REQUEST_ID] = request_id
            return response
        finally:
            clear_request_id()

    @app.exception_handler(CacheLayerError)
    async def cache_layer_exception_handler(request: Request, exc: CacheLayerError):
        """Cache-layer failures that reach the HTTP boundary become 503s."""
        logger.error(
            f"Cache layer error: {exc.message}",
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return JSONResponse(status_code=503, content={"success": False, **exc.to_dict()})

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app.APP_NAME,
            "version": settings.app.APP_VERSION,
            "environment": settings.app.ENVIRONMENT,
            "docs": "/docs",
            "cache_admin": cache_admin_router.prefix,
        }

    return app


# Create application instance
app = create_app()


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "commerce_cache.application.app:app",
        host=settings.app.API_HOST,
        port=settings.app.API_PORT,
        reload=settings.app.ENVIRONMENT == "development",
        log_level=settings.logging.LOG_LEVEL.lower(),
    )
