from decimal import Decimal
from typing import Annotated, Dict, List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer

from ..models import OrderStatus, PaymentStatus, UserRole  # Import from models, not define locally

# Money is Decimal internally and a JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)


class Category(CategoryCreate):
    id: str

    model_config = ConfigDict(from_attributes=True)


class AnimeSeriesCreate(BaseModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    featured: bool = False
    header_image_url: Optional[str] = None


class AnimeSeriesUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    featured: Optional[bool] = None
    header_image_url: Optional[str] = None


class AnimeSeries(AnimeSeriesCreate):
    id: str

    model_config = ConfigDict(from_attributes=True)


class ProductBase(BaseModel):
    slug: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Money = Field(..., gt=0)
    sale_price: Optional[Money] = Field(None, gt=0)
    is_sale: bool = False
    is_preorder: bool = False
    featured: bool = False
    stock: int = 0
    image_url: Optional[str] = None
    category_id: Optional[str] = None
    anime_id: Optional[str] = None


class ProductCreate(ProductBase):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "slug": "naruto-headband",
                "name": "Naruto Headband",
                "description": "Leaf Village headband",
                "price": 25.0,
                "stock": 10,
            }
        }
    )


class ProductUpdate(BaseModel):
    slug: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[Money] = Field(None, gt=0)
    sale_price: Optional[Money] = Field(None, gt=0)
    is_sale: Optional[bool] = None
    is_preorder: Optional[bool] = None
    featured: Optional[bool] = None
    stock: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    category_id: Optional[str] = None
    anime_id: Optional[str] = None

    model_config = ConfigDict(json_schema_extra={"example": {"price": 28.0, "is_sale": True, "stock": 20}})


class Product(ProductBase):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "prod_1",
                "slug": "naruto-headband",
                "name": "Naruto Headband",
                "description": "Leaf Village headband",
                "price": 25.0,
                "sale_price": None,
                "is_sale": False,
                "is_preorder": False,
                "featured": False,
                "stock": 10,
                "image_url": None,
                "category_id": None,
                "anime_id": None,
                "created_at": "2025-11-13T12:00:00Z",
                "updated_at": "2025-11-13T12:00:00Z",
            }
        },
    )


class ProductList(BaseModel):
    items: List[Product]
    page: int
    size: int
    total: int


class OrderItemCreate(BaseModel):
    product_id: str
    quantity: int = Field(..., gt=0)


class OrderCreate(BaseModel):
    customer_name: str = Field(..., min_length=1)
    email: EmailStr
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    items: List[OrderItemCreate] = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "customer_name": "Test Buyer",
                "email": "buyer@example.com",
                "address": "1 Konoha St",
                "city": "Konoha",
                "zip_code": "00001",
                "items": [{"product_id": "prod_1", "quantity": 2}],
            }
        }
    )


class OrderItem(BaseModel):
    id: int
    product_id: str
    quantity: int
    price: Money
    product: Optional[Product] = None

    model_config = ConfigDict(from_attributes=True)


class Order(BaseModel):
    id: str
    customer_name: str
    email: str
    address: str
    city: str
    zip_code: str
    status: OrderStatus
    payment_status: PaymentStatus
    total: Money
    user_id: Optional[str] = None
    stripe_session_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderDetail(Order):
    items: List[OrderItem] = []


class OrderPlaced(BaseModel):
    order_id: str
    total: Money
    status: OrderStatus
    payment_status: PaymentStatus
    checkout_url: Optional[str] = None
    checkout_error: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "order_id": "9f1c2b",
                "total": 60.0,
                "status": "PENDING",
                "payment_status": "UNPAID",
                "checkout_url": "https://checkout.stripe.com/c/pay/cs_test_123",
                "checkout_error": None,
            }
        }
    )


class ProductIds(BaseModel):
    product_ids: List[str] = Field(..., min_length=1, max_length=200)


class WishlistAdd(BaseModel):
    product_id: str


class WishlistItem(BaseModel):
    id: int
    product_id: str
    created_at: datetime
    product: Optional[Product] = None

    model_config = ConfigDict(from_attributes=True)


class WishlistShare(BaseModel):
    token: str


class SharedWishlist(BaseModel):
    owner_name: str
    items: List[WishlistItem]


class StockAlertSubscribe(BaseModel):
    product_id: str
    email: EmailStr


class StockAlert(BaseModel):
    id: int
    user_id: str
    product_id: str
    email: str
    notified: bool
    created_at: datetime
    product: Optional[Product] = None

    model_config = ConfigDict(from_attributes=True)


class AddressCreate(BaseModel):
    name: str = Field(..., min_length=1)
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = "US"
    is_default: Optional[bool] = None


class AddressUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    street: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    state: Optional[str] = Field(None, min_length=1)
    zip_code: Optional[str] = Field(None, min_length=1)
    country: Optional[str] = None
    is_default: Optional[bool] = None


class Address(BaseModel):
    id: str
    user_id: str
    name: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    is_default: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


StatusMap = Dict[str, bool]


class UserSync(BaseModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = None


class UserRoleUpdate(BaseModel):
    role: UserRole


class User(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: UserRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
