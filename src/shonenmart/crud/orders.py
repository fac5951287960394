from decimal import Decimal
import logging

from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError, OperationalError

from .. import models, schemas
from ..models import OrderStatus, PaymentStatus
from ..services import pricing
from .exceptions import (
    ProductNotFoundError,
    OrderNotFoundError,
    InsufficientStockError,
    InvalidTransitionError,
    TransactionFailureError,
)

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def get_order(db: Session, order_id: str):
    return db.query(models.Order).filter(models.Order.id == order_id).first()


def get_order_detail(db: Session, order_id: str):
    """Order with its items and each item's product, or None."""
    return (
        db.query(models.Order)
        .options(selectinload(models.Order.items).selectinload(models.OrderItem.product))
        .filter(models.Order.id == order_id)
        .first()
    )


def list_orders(db: Session, user_id=None):
    """Orders newest first; all of them, or only those owned by `user_id`."""
    query = db.query(models.Order).options(
        selectinload(models.Order.items).selectinload(models.OrderItem.product)
    )
    if user_id is not None:
        query = query.filter(models.Order.user_id == user_id)
    return query.order_by(models.Order.created_at.desc(), models.Order.id).all()


def _lock_product(db: Session, product_id: str):
    # Row lock held until commit; SQLite serializes writers instead
    return (
        db.query(models.Product)
        .filter(models.Product.id == product_id)
        .with_for_update(nowait=False)
        .first()
    )


def _decrement_stock(db: Session, product, quantity: int, enforce_stock_check: bool):
    query = db.query(models.Product).filter(models.Product.id == product.id)
    if enforce_stock_check:
        query = query.filter(models.Product.stock >= quantity)
    try:
        updated = query.update(
            {models.Product.stock: models.Product.stock - quantity},
            synchronize_session="fetch",
        )
    except IntegrityError:
        # ck_product_stock_non_negative rejected the write
        raise InsufficientStockError(product.id, product.name, product.stock)
    if updated == 0:
        available = db.query(models.Product.stock).filter(models.Product.id == product.id).scalar()
        raise InsufficientStockError(product.id, product.name, available)


def create_order(
    db: Session,
    order: schemas.OrderCreate,
    user_id=None,
    shipping_fee: Decimal = pricing.DEFAULT_SHIPPING_FEE,
    apply_sale_price: bool = True,
    enforce_stock_check: bool = True,
):
    """Validate, price and persist an order in one transaction.

    Each line locks its product, checks stock and decrements it with a single
    conditional UPDATE, so two concurrent orders can never drive stock below
    zero. Any failure rolls back every decrement and no order row is left.

    Raises ProductNotFoundError, InsufficientStockError or
    TransactionFailureError (lock wait or statement timeout).
    """
    try:
        line_totals = []
        items = []
        for line in order.items:
            product = _lock_product(db, line.product_id)
            if not product:
                raise ProductNotFoundError(line.product_id)
            if enforce_stock_check and product.stock < line.quantity:
                raise InsufficientStockError(product.id, product.name, product.stock)

            unit_price = pricing.effective_unit_price(product, apply_sale_price)
            line_totals.append(pricing.line_total(unit_price, line.quantity))
            _decrement_stock(db, product, line.quantity, enforce_stock_check)
            items.append(models.OrderItem(product_id=product.id, quantity=line.quantity, price=unit_price))

        db_order = models.Order(
            customer_name=order.customer_name,
            email=order.email,
            address=order.address,
            city=order.city,
            zip_code=order.zip_code,
            total=pricing.order_total(line_totals, shipping_fee),
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.UNPAID,
            user_id=user_id,
            items=items,
        )
        db.add(db_order)
        db.commit()
    except OperationalError as e:
        db.rollback()
        raise TransactionFailureError(str(e.orig)) from e
    except Exception:
        db.rollback()
        raise
    db.refresh(db_order)
    logger.info(f"Created order {db_order.id} with {len(items)} item(s), total {db_order.total}")
    return db_order


def attach_checkout_session(db: Session, order_id: str, session_id: str):
    db_order = get_order(db, order_id)
    if not db_order:
        raise OrderNotFoundError(order_id)
    db_order.stripe_session_id = session_id
    db.commit()
    db.refresh(db_order)
    return db_order


def restore_stock(db: Session, db_order):
    for item in db_order.items:
        db.query(models.Product).filter(models.Product.id == item.product_id).update(
            {models.Product.stock: models.Product.stock + item.quantity},
            synchronize_session="fetch",
        )


def update_order_status(db: Session, order_id: str, new_status: OrderStatus, enforce_transition_graph: bool = True):
    """Move an order to `new_status`.

    Returns `(order, changed)`. Setting the current status again is a no-op,
    which is what keeps a repeated cancellation from restoring stock twice.
    Entering CANCELLED restores stock for every item in the same transaction.
    """
    try:
        db_order = (
            db.query(models.Order)
            .filter(models.Order.id == order_id)
            .with_for_update(nowait=False)
            .first()
        )
        if not db_order:
            raise OrderNotFoundError(order_id)
        current = db_order.status
        if new_status == current:
            db.rollback()
            return db_order, False
        if enforce_transition_graph and new_status not in ALLOWED_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(current, new_status)
        if new_status == OrderStatus.CANCELLED:
            restore_stock(db, db_order)
        elif current == OrderStatus.CANCELLED:
            # only reachable with the transition graph disabled
            logger.warning(f"Order {order_id} leaves CANCELLED without re-reserving stock")
        db_order.status = new_status
        db.commit()
    except OperationalError as e:
        db.rollback()
        raise TransactionFailureError(str(e.orig)) from e
    except Exception:
        db.rollback()
        raise
    db.refresh(db_order)
    logger.info(f"Order {order_id} moved from {current.value} to {new_status.value}")
    return db_order, True
