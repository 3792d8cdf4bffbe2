"""
Cache Warming Service
=====================

WHAT IS THIS SERVICE?
---------------------
Pre-loads the payloads every storefront and admin page needs (store settings,
category tree, dashboard metrics, featured products, month-to-date analytics)
so the first requests after a deploy or a cache clear are hits.

HOW IT GETS DATA
----------------
The service never imports the catalog, order or analytics services. It asks a
DataSource for each payload and turns the answers into WarmupDescriptors that
CacheClient.warm_cache() writes concurrently.

FAILURE POLICY
--------------
- A producer that raises is logged and its entry skipped; the others still warm
- A producer that returns None is skipped (nothing to cache)
- A failed periodic pass is logged and the loop keeps its schedule

SCHEDULE
--------
- Hot data (settings, categories, dashboard, featured products): every
  CACHE_WARMUP_INTERVAL_SECONDS (30 minutes by default)
- Analytics: every CACHE_ANALYTICS_WARMUP_INTERVAL_SECONDS (1 hour by default)
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timezone
from typing import Any

import structlog

from commerce_cache.core.config.constants import CACHE_KEYS, CACHE_TTL, Stage
from commerce_cache.core.config.settings import Settings, get_settings
from commerce_cache.core.interfaces.data_source import DataSource
from commerce_cache.core.logging.logger import log_stage
from commerce_cache.infrastructure.cache.cache_client import CacheClient, WarmupDescriptor
from commerce_cache.infrastructure.cache.key_generator import CacheKeyGenerator

logger = structlog.get_logger(__name__)

ANALYTICS_INTERVAL = "daily"


class CacheWarmingService:
    """
    Proactive cache population, on demand and on a schedule.

    DESIGN PRINCIPLES:
    ------------------
    - Dependency injection: receives the cache client and the data source
    - One descriptor per payload, so one bad producer never blocks the rest
    - Timers are asyncio tasks owned by the service; rescheduling replaces them
    """

    def __init__(
        self,
        cache: CacheClient,
        data_source: DataSource,
        key_generator: CacheKeyGenerator | None = None,
        settings: Settings | None = None,
    ):
        self._cache = cache
        self._source = data_source
        self._keys = key_generator or CacheKeyGenerator()
        self._settings = settings or get_settings()
        self._tasks: list[asyncio.Task] = []

    async def _describe(
        self, key: str, ttl: int, producer: Callable[[], Awaitable[Any]]
    ) -> WarmupDescriptor | None:
        try:
            value = await producer()
        except Exception as e:
            log_stage(
                logger,
                Stage.WARMUP,
                "Warmup producer failed, skipping entry",
                level="error",
                cache_key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
        if value is None:
            logger.debug("Warmup producer returned nothing", cache_key=key)
            return None
        return WarmupDescriptor(key=key, value=value, ttl=ttl)

    async def _warm(self, descriptors: list[WarmupDescriptor | None]) -> int:
        entries = [d for d in descriptors if d is not None]
        if not entries:
            return 0
        return await self._cache.warm_cache(entries)

    # -------------------------------------------------------------------------
    # Warm-up passes
    # -------------------------------------------------------------------------

    async def warmup_frequently_accessed_data(self) -> int:
        """
        Warm system settings, the category tree and dashboard metrics.

        Returns:
            Number of entries written
        """
        log_stage(logger, Stage.WARMUP, "Starting cache warmup for frequently accessed data")

        descriptors = [
            await self._describe(
                self._keys.generate_simple_key(CACHE_KEYS.SYSTEM_SETTINGS, "all"),
                CACHE_TTL.SYSTEM_SETTINGS,
                self._source.fetch_system_settings,
            ),
            await self._describe(
                self._keys.generate_simple_key(CACHE_KEYS.CATEGORY_TREE, "all"),
                CACHE_TTL.CATEGORY_TREE,
                self._source.fetch_category_tree,
            ),
            await self._describe(
                self._keys.generate_simple_key(CACHE_KEYS.DASHBOARD_METRICS, "current"),
                CACHE_TTL.DASHBOARD_METRICS,
                self._source.fetch_dashboard_metrics,
            ),
        ]

        written = await self._warm(descriptors)
        log_stage(logger, Stage.WARMUP, "Frequently accessed data warmed", written=written)
        return written

    async def warmup_user_data(self, user_id: str) -> int:
        """Warm the details entry of a single user."""
        descriptor = await self._describe(
            self._keys.generate_simple_key(CACHE_KEYS.USER_DETAILS, user_id),
            CACHE_TTL.USER_DETAILS,
            lambda: self._source.fetch_user(user_id),
        )
        return await self._warm([descriptor])

    async def warmup_featured_products(self) -> int:
        """Warm one product-details entry per featured product."""
        try:
            products = await self._source.fetch_featured_products()
        except Exception as e:
            log_stage(
                logger,
                Stage.WARMUP,
                "Featured products producer failed",
                level="error",
                error=str(e),
            )
            return 0

        descriptors = []
        for product in products or []:
            product_id = product.get("id") if isinstance(product, dict) else None
            if product_id is None:
                logger.warning("Featured product without id skipped", product=product)
                continue
            descriptors.append(
                WarmupDescriptor(
                    key=self._keys.generate_simple_key(CACHE_KEYS.PRODUCT_DETAILS, product_id),
                    value=product,
                    ttl=CACHE_TTL.PRODUCT_DETAILS,
                )
            )

        written = await self._warm(descriptors)
        log_stage(logger, Stage.WARMUP, "Featured products warmed", written=written)
        return written

    async def warmup_analytics_data(self, now: datetime | None = None) -> int:
        """
        Warm month-to-date sales and order analytics at daily granularity.

        Args:
            now: Reference instant (defaults to the current UTC time)
        """
        today = (now or datetime.now(timezone.utc)).date()
        start_of_month = date(today.year, today.month, 1)

        descriptors = [
            await self._describe(
                self._keys.generate_analytics_key(
                    CACHE_KEYS.SALES_ANALYTICS, start_of_month, today, ANALYTICS_INTERVAL
                ),
                CACHE_TTL.SALES_ANALYTICS,
                lambda: self._source.fetch_sales_analytics(start_of_month, today, ANALYTICS_INTERVAL),
            ),
            await self._describe(
                self._keys.generate_analytics_key(
                    CACHE_KEYS.ORDER_ANALYTICS, start_of_month, today, ANALYTICS_INTERVAL
                ),
                CACHE_TTL.ORDER_ANALYTICS,
                lambda: self._source.fetch_order_analytics(start_of_month, today, ANALYTICS_INTERVAL),
            ),
        ]

        written = await self._warm(descriptors)
        log_stage(
            logger,
            Stage.WARMUP,
            "Analytics warmed",
            written=written,
            date_from=start_of_month.isoformat(),
            date_to=today.isoformat(),
        )
        return written

    async def _refresh_hot_data(self) -> None:
        await self.warmup_frequently_accessed_data()
        await self.warmup_featured_products()

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    async def _run_periodically(
        self, name: str, interval_seconds: float, job: Callable[[], Awaitable[Any]]
    ) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await job()
            except Exception as e:
                log_stage(
                    logger,
                    Stage.WARMUP,
                    "Periodic cache warmup failed",
                    level="error",
                    job=name,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    def schedule_periodic_warmup(self) -> None:
        """
        Start the hot-data and analytics warmup loops.

        Must be called from a running event loop. Calling it again replaces
        the previous loops instead of stacking new ones.
        """
        self.stop_periodic_warmup()

        cache_settings = self._settings.cache
        self._tasks = [
            asyncio.create_task(
                self._run_periodically(
                    "hot_data", cache_settings.CACHE_WARMUP_INTERVAL_SECONDS, self._refresh_hot_data
                ),
                name="cache-warmup-hot-data",
            ),
            asyncio.create_task(
                self._run_periodically(
                    "analytics",
                    cache_settings.CACHE_ANALYTICS_WARMUP_INTERVAL_SECONDS,
                    self.warmup_analytics_data,
                ),
                name="cache-warmup-analytics",
            ),
        ]

        log_stage(
            logger,
            Stage.WARMUP,
            "Periodic cache warmup scheduled",
            hot_data_interval_seconds=cache_settings.CACHE_WARMUP_INTERVAL_SECONDS,
            analytics_interval_seconds=cache_settings.CACHE_ANALYTICS_WARMUP_INTERVAL_SECONDS,
        )

    def stop_periodic_warmup(self) -> None:
        if not self._tasks:
            return
        for task in self._tasks:
            task.cancel()
        self._tasks = []
        log_stage(logger, Stage.WARMUP, "Periodic cache warmup stopped")

    @property
    def is_scheduled(self) -> bool:
        return any(not task.done() for task in self._tasks)
