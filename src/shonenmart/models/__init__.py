"""Models package re-exports for easy imports from `shonenmart.models`."""
from .models import (
    Base,
    User,
    UserRole,
    Category,
    AnimeSeries,
    Product,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    StockAlert,
    WishlistItem,
    Address,
    WebhookEvent,
    generate_id,
)

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Category",
    "AnimeSeries",
    "Product",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "StockAlert",
    "WishlistItem",
    "Address",
    "WebhookEvent",
    "generate_id",
]
