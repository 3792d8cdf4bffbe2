"""
Cache Monitoring Service

Exposes cache metrics, health and tuning recommendations, and optionally logs
them on a fixed interval.
"""

import asyncio
from typing import Any

import structlog

from commerce_cache.core.config.constants import (
    LOW_HIT_RATE_PCT,
    MAX_ERROR_RATIO,
    SLOW_RESPONSE_MS,
    TARGET_HIT_RATE_PCT,
    VERY_SLOW_RESPONSE_MS,
    Stage,
)
from commerce_cache.core.logging.logger import log_stage
from commerce_cache.infrastructure.cache.cache_client import CacheClient
from commerce_cache.infrastructure.cache.metrics import CacheMetrics

logger = structlog.get_logger(__name__)

RECOMMEND_NO_TRAFFIC = "No cache requests detected - ensure caching is wired into the read paths"
RECOMMEND_REVIEW_KEYS = "Consider reviewing cache keys and TTL values - hit rate is very low"
RECOMMEND_WARMING = "Cache hit rate could be improved - consider cache warming strategies"
RECOMMEND_CHECK_BACKEND = "High error rate detected - check Redis connection and configuration"
RECOMMEND_TUNE_BACKEND = "High cache response time - consider Redis performance tuning"
RECOMMEND_OPTIMAL = "Cache performance is optimal"


def generate_recommendations(metrics: CacheMetrics) -> list[str]:
    """
    Tuning advice derived from a metrics snapshot. Never empty.

    Every threshold is checked on its own; an idle cache reports a 0% hit
    rate, so it gets the hit-rate advice as well as the no-traffic hint.
    """
    recommendations: list[str] = []

    if metrics.hit_rate < LOW_HIT_RATE_PCT:
        recommendations.append(RECOMMEND_REVIEW_KEYS)

    if metrics.hit_rate < TARGET_HIT_RATE_PCT:
        recommendations.append(RECOMMEND_WARMING)

    if metrics.errors > metrics.total_requests * MAX_ERROR_RATIO:
        recommendations.append(RECOMMEND_CHECK_BACKEND)

    if metrics.average_response_time > SLOW_RESPONSE_MS:
        recommendations.append(RECOMMEND_TUNE_BACKEND)

    if metrics.total_requests == 0:
        recommendations.append(RECOMMEND_NO_TRAFFIC)

    if not recommendations:
        recommendations.append(RECOMMEND_OPTIMAL)

    return recommendations


class CacheMonitoringService:
    """
    Read-side view over CacheClient metrics plus an optional periodic logger.

    Usage:
        monitoring = CacheMonitoringService(cache_client)
        health = await monitoring.get_cache_health()
        monitoring.start_monitoring(interval_seconds=60)
    """

    def __init__(self, cache: CacheClient):
        self._cache = cache
        self._task: asyncio.Task | None = None

    def get_cache_metrics(self) -> CacheMetrics:
        return self._cache.get_metrics()

    def generate_recommendations(self, metrics: CacheMetrics | None = None) -> list[str]:
        return generate_recommendations(metrics or self.get_cache_metrics())

    async def get_cache_health(self) -> dict[str, Any]:
        """
        Availability, metrics, memory usage and recommendations.

        Returns:
            {"is_available", "metrics", "memory_usage", "recommendations"}
        """
        is_available = await self._cache.is_available()
        metrics = self.get_cache_metrics()
        memory_usage = await self._cache.get_memory_usage()

        return {
            "is_available": is_available,
            "metrics": metrics.to_dict(),
            "memory_usage": memory_usage,
            "recommendations": generate_recommendations(metrics),
        }

    async def generate_performance_report(self) -> dict[str, Any]:
        """Human-readable summary plus the data it was built from."""
        metrics = self.get_cache_metrics()
        health = await self.get_cache_health()

        summary = "\n".join(
            [
                "Cache Performance Summary:",
                f"- Hit Rate: {metrics.hit_rate}%",
                f"- Total Requests: {metrics.total_requests}",
                f"- Average Response Time: {metrics.average_response_time:.2f}ms",
                f"- Errors: {metrics.errors}",
                f"- Cache Availability: {'Available' if health['is_available'] else 'Unavailable'}",
            ]
        )

        return {
            "summary": summary,
            "metrics": metrics.to_dict(),
            "health": health,
            "recommendations": health["recommendations"],
        }

    def reset_metrics(self) -> None:
        self._cache.reset_metrics()
        log_stage(logger, Stage.MONITORING, "Cache metrics reset")

    # -------------------------------------------------------------------------
    # Periodic monitoring
    # -------------------------------------------------------------------------

    def _log_cache_metrics(self) -> None:
        metrics = self.get_cache_metrics()

        log_stage(
            logger,
            Stage.MONITORING,
            "Cache metrics",
            hit_rate=metrics.hit_rate,
            hits=metrics.hits,
            misses=metrics.misses,
            errors=metrics.errors,
            average_response_time_ms=round(metrics.average_response_time, 2),
        )

        if metrics.hit_rate < TARGET_HIT_RATE_PCT:
            logger.warning("Low cache hit rate", hit_rate=metrics.hit_rate)
        if metrics.errors > 0:
            logger.warning("Cache errors detected", errors=metrics.errors)
        if metrics.average_response_time > VERY_SLOW_RESPONSE_MS:
            logger.warning(
                "High cache response time",
                average_response_time_ms=round(metrics.average_response_time, 2),
            )

    async def _check_cache_health(self) -> None:
        if not await self._cache.is_available():
            log_stage(logger, Stage.MONITORING, "Cache is not available", level="error")
            return

        memory_usage = await self._cache.get_memory_usage()
        if memory_usage and "used_memory_human" in memory_usage:
            logger.debug("Cache memory usage", used_memory=memory_usage["used_memory_human"])

    async def _tick(self) -> None:
        self._log_cache_metrics()
        await self._check_cache_health()

    async def _run(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await self._tick()
            except Exception as e:
                log_stage(
                    logger,
                    Stage.MONITORING,
                    "Cache monitoring tick failed",
                    level="error",
                    error=str(e),
                )

    def start_monitoring(self, interval_seconds: float = 60) -> None:
        """Start the periodic logger; an already running one is replaced."""
        if self._task is not None:
            self.stop_monitoring()

        self._task = asyncio.create_task(self._run(interval_seconds), name="cache-monitoring")
        log_stage(
            logger, Stage.MONITORING, "Cache monitoring started", interval_seconds=interval_seconds
        )

    def stop_monitoring(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        log_stage(logger, Stage.MONITORING, "Cache monitoring stopped")

    @property
    def is_monitoring(self) -> bool:
        return self._task is not None and not self._task.done()
