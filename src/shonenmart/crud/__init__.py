"""CRUD package re-exports for easy imports from `shonenmart.crud`."""
from .products import (
    get_product,
    get_products,
    count_products,
    create_product,
    update_product,
    update_product_partial,
    delete_product,
)
from .catalog import (
    get_categories,
    create_category,
    get_series,
    get_series_by_id,
    create_series,
    update_series,
    delete_series,
)
from .orders import (
    ALLOWED_TRANSITIONS,
    create_order,
    get_order,
    get_order_detail,
    list_orders,
    attach_checkout_session,
    restore_stock,
    update_order_status,
)
from .webhooks import (
    record_webhook_event,
    process_checkout_completed,
    process_checkout_expired,
    PROCESSED,
    DUPLICATE,
    SKIPPED,
)
from .users import get_user, get_users, get_user_role, upsert_user, sync_user, set_user_role
from .wishlist import (
    add_item,
    remove_item,
    get_items,
    is_wishlisted,
    wishlist_statuses,
    get_share_token,
    get_shared_wishlist,
)
from .stock_alerts import (
    subscribe,
    unsubscribe,
    is_subscribed,
    alert_statuses,
    get_pending_alerts,
    claim_restock_alerts,
)
from .addresses import create_address, update_address, delete_address, get_addresses

__all__ = [
    "get_product",
    "get_products",
    "count_products",
    "create_product",
    "update_product",
    "update_product_partial",
    "delete_product",
    "get_categories",
    "create_category",
    "get_series",
    "get_series_by_id",
    "create_series",
    "update_series",
    "delete_series",
    "ALLOWED_TRANSITIONS",
    "create_order",
    "get_order",
    "get_order_detail",
    "list_orders",
    "attach_checkout_session",
    "restore_stock",
    "update_order_status",
    "record_webhook_event",
    "process_checkout_completed",
    "process_checkout_expired",
    "PROCESSED",
    "DUPLICATE",
    "SKIPPED",
    "get_user",
    "get_users",
    "get_user_role",
    "upsert_user",
    "sync_user",
    "set_user_role",
    "add_item",
    "remove_item",
    "get_items",
    "is_wishlisted",
    "wishlist_statuses",
    "get_share_token",
    "get_shared_wishlist",
    "subscribe",
    "unsubscribe",
    "is_subscribed",
    "alert_statuses",
    "get_pending_alerts",
    "claim_restock_alerts",
    "create_address",
    "update_address",
    "delete_address",
    "get_addresses",
]

# re-export exceptions
from .exceptions import (
    NotFoundError,
    ProductNotFoundError,
    OrderNotFoundError,
    InsufficientStockError,
    InvalidTransitionError,
    TransactionFailureError,
    DuplicateError,
    InvalidReferenceError,
)
__all__.extend([
    "NotFoundError",
    "ProductNotFoundError",
    "OrderNotFoundError",
    "InsufficientStockError",
    "InvalidTransitionError",
    "TransactionFailureError",
    "DuplicateError",
    "InvalidReferenceError",
])
