"""HTTP routers, one per resource."""
from . import addresses, catalog, orders, products, sitemap, stock_alerts, testing, users, webhooks, wishlist

__all__ = [
    "addresses",
    "catalog",
    "orders",
    "products",
    "sitemap",
    "stock_alerts",
    "testing",
    "users",
    "webhooks",
    "wishlist",
]
