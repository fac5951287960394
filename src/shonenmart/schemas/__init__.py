"""Schemas package re-exports for easy imports from `shonenmart.schemas`."""
from .schemas import (
    Money,
    Category,
    CategoryCreate,
    AnimeSeries,
    AnimeSeriesCreate,
    AnimeSeriesUpdate,
    Product,
    ProductCreate,
    ProductBase,
    ProductUpdate,
    ProductList,
    OrderItemCreate,
    OrderCreate,
    OrderItem,
    Order,
    OrderDetail,
    OrderPlaced,
    ProductIds,
    WishlistAdd,
    WishlistItem,
    WishlistShare,
    SharedWishlist,
    StockAlertSubscribe,
    StockAlert,
    AddressCreate,
    AddressUpdate,
    Address,
    StatusMap,
    UserSync,
    UserRoleUpdate,
    User,
)

__all__ = [
    "Money",
    "Category",
    "CategoryCreate",
    "AnimeSeries",
    "AnimeSeriesCreate",
    "AnimeSeriesUpdate",
    "Product",
    "ProductCreate",
    "ProductBase",
    "ProductUpdate",
    "ProductList",
    "OrderItemCreate",
    "OrderCreate",
    "OrderItem",
    "Order",
    "OrderDetail",
    "OrderPlaced",
    "ProductIds",
    "WishlistAdd",
    "WishlistItem",
    "WishlistShare",
    "SharedWishlist",
    "StockAlertSubscribe",
    "StockAlert",
    "AddressCreate",
    "AddressUpdate",
    "Address",
    "StatusMap",
    "UserSync",
    "UserRoleUpdate",
    "User",
]
