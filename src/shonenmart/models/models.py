from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    Numeric,
    CheckConstraint,
    UniqueConstraint,
    ForeignKey,
    Enum as SAEnum,
    DateTime,
)
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime
import enum
import uuid

Base = declarative_base()


def generate_id():
    return uuid.uuid4().hex


class OrderStatus(enum.Enum):
    PENDING = "PENDING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(enum.Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    FAILED = "FAILED"


class UserRole(enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"
    # issued by the identity provider
    id = Column(String, primary_key=True)
    email = Column(String, nullable=True, index=True)
    name = Column(String, nullable=True)
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.USER)
    # public link to the wishlist, issued on first share
    wishlist_share_token = Column(String, nullable=True, unique=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)


class Category(Base):
    __tablename__ = "categories"
    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, nullable=False, unique=True)
    slug = Column(String, nullable=False, unique=True, index=True)


class AnimeSeries(Base):
    __tablename__ = "anime_series"
    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, nullable=False, unique=True)
    slug = Column(String, nullable=False, unique=True, index=True)
    featured = Column(Boolean, nullable=False, default=False)
    header_image_url = Column(String, nullable=True)

    products = relationship("Product", back_populates="anime")


class Product(Base):
    __tablename__ = "products"
    id = Column(String, primary_key=True, default=generate_id)
    slug = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    sale_price = Column(Numeric(10, 2), nullable=True)
    is_sale = Column(Boolean, nullable=False, default=False)
    is_preorder = Column(Boolean, nullable=False, default=False)
    featured = Column(Boolean, nullable=False, default=False)
    stock = Column(Integer, nullable=False, default=0)
    image_url = Column(String, nullable=True)
    category_id = Column(String, ForeignKey("categories.id"), nullable=True)
    anime_id = Column(String, ForeignKey("anime_series.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    category = relationship("Category")
    anime = relationship("AnimeSeries", back_populates="products")

    __table_args__ = (
        UniqueConstraint("slug", name="uq_product_slug"),
        CheckConstraint("price > 0", name="ck_product_price_positive"),
        CheckConstraint("sale_price IS NULL OR sale_price > 0", name="ck_product_sale_price_positive"),
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
    )


class Order(Base):
    __tablename__ = "orders"
    id = Column(String, primary_key=True, default=generate_id)
    customer_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False)
    zip_code = Column(String, nullable=False)
    status = Column(SAEnum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    payment_status = Column(SAEnum(PaymentStatus), nullable=False, default=PaymentStatus.UNPAID)
    total = Column(Numeric(10, 2), nullable=False)
    # null for guest checkout
    user_id = Column(String, nullable=True, index=True)
    stripe_session_id = Column(String, nullable=True, unique=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("total >= 0", name="ck_order_total_non_negative"),
    )


class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    # unit price frozen at purchase time
    price = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_item_quantity_positive"),
    )


class StockAlert(Base):
    __tablename__ = "stock_alerts"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    email = Column(String, nullable=False)
    notified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    product = relationship("Product")

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_stock_alert_user_product"),
    )


class WishlistItem(Base):
    __tablename__ = "wishlist_items"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    product = relationship("Product")

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_wishlist_user_product"),
    )


class Address(Base):
    __tablename__ = "addresses"
    id = Column(String, primary_key=True, default=generate_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    street = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    zip_code = Column(String, nullable=False)
    country = Column(String, nullable=False, default="US")
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)


class WebhookEvent(Base):
    __tablename__ = "webhook_events"
    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(String, nullable=False, unique=True, index=True)
    event_type = Column(String, nullable=True)
    received_at = Column(DateTime, default=datetime.now, nullable=False)
