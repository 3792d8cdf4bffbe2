"""
Warm-up Data Source Protocol

The warming service never talks to the catalog, order or analytics services
directly. It depends on this capability interface; production wiring supplies
an adapter that delegates to the real domain services.
"""

from datetime import date
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DataSource(Protocol):
    """Producers of the high-traffic payloads that get pre-loaded into the cache."""

    async def fetch_system_settings(self) -> Any:
        """Global store settings."""
        ...

    async def fetch_category_tree(self) -> Any:
        """Full category hierarchy (rendered on every product page)."""
        ...

    async def fetch_dashboard_metrics(self) -> Any:
        """Current admin dashboard metrics."""
        ...

    async def fetch_featured_products(self) -> list[dict[str, Any]]:
        """Featured products; every item must carry an ``id``."""
        ...

    async def fetch_user(self, user_id: str) -> Any:
        """User details for a single account."""
        ...

    async def fetch_sales_analytics(self, date_from: date, date_to: date, interval: str) -> Any:
        """Sales analytics for a date range."""
        ...

    async def fetch_order_analytics(self, date_from: date, date_to: date, interval: str) -> Any:
        """Order analytics for a date range."""
        ...
