"""
In-memory DataSource used by default wiring and by tests.

Every payload is seedable through the constructor; production deployments
replace it with an adapter over the real catalog and analytics services.
"""

from copy import deepcopy
from datetime import date
from typing import Any

DEFAULT_SYSTEM_SETTINGS = {
    "currency": "USD",
    "tax_inclusive_pricing": False,
    "maintenance_mode": False,
}
DEFAULT_CATEGORY_TREE = [
    {"id": "electronics", "name": "Electronics", "children": [{"id": "phones", "name": "Phones"}]},
    {"id": "books", "name": "Books", "children": []},
]
DEFAULT_DASHBOARD_METRICS = {"orders_today": 0, "revenue_today": 0.0, "active_users": 0}
DEFAULT_FEATURED_PRODUCTS = [{"id": "1", "name": "Featured Product 1"}]


class StaticDataSource:
    """Seedable DataSource returning copies of fixed payloads."""

    def __init__(
        self,
        system_settings: Any = None,
        category_tree: Any = None,
        dashboard_metrics: Any = None,
        featured_products: list[dict[str, Any]] | None = None,
        users: dict[str, Any] | None = None,
        sales_totals: dict[str, Any] | None = None,
        order_totals: dict[str, Any] | None = None,
    ):
        self.system_settings = DEFAULT_SYSTEM_SETTINGS if system_settings is None else system_settings
        self.category_tree = DEFAULT_CATEGORY_TREE if category_tree is None else category_tree
        self.dashboard_metrics = DEFAULT_DASHBOARD_METRICS if dashboard_metrics is None else dashboard_metrics
        self.featured_products = DEFAULT_FEATURED_PRODUCTS if featured_products is None else featured_products
        self.users = users or {}
        self.sales_totals = sales_totals or {"revenue": 0.0, "orders": 0}
        self.order_totals = order_totals or {"placed": 0, "fulfilled": 0, "cancelled": 0}

    async def fetch_system_settings(self) -> Any:
        return deepcopy(self.system_settings)

    async def fetch_category_tree(self) -> Any:
        return deepcopy(self.category_tree)

    async def fetch_dashboard_metrics(self) -> Any:
        return deepcopy(self.dashboard_metrics)

    async def fetch_featured_products(self) -> list[dict[str, Any]]:
        return deepcopy(self.featured_products)

    async def fetch_user(self, user_id: str) -> Any:
        user = self.users.get(user_id)
        return deepcopy(user) if user is not None else None

    async def fetch_sales_analytics(self, date_from: date, date_to: date, interval: str) -> Any:
        return {
            "from": date_from.isoformat(),
            "to": date_to.isoformat(),
            "interval": interval,
            **deepcopy(self.sales_totals),
        }

    async def fetch_order_analytics(self, date_from: date, date_to: date, interval: str) -> Any:
        return {
            "from": date_from.isoformat(),
            "to": date_to.isoformat(),
            "interval": interval,
            **deepcopy(self.order_totals),
        }
