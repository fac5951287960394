"""Order placement, checkout and status changes.

Everything after the database commit (checkout session, emails) is a
collaborator call that must never undo the order.
"""
from decimal import Decimal
import logging

from sqlalchemy.orm import Session

from .. import crud, schemas
from ..models import OrderStatus, PaymentStatus
from .payments import CheckoutLineItem, PaymentProviderError
from .pricing import to_minor_units

logger = logging.getLogger(__name__)

CHECKOUT_RETRY_MESSAGE = "Payment session could not be created; retry checkout for this order"

STATUS_EMAILS = {
    OrderStatus.SHIPPED: "send_shipping_update",
    OrderStatus.DELIVERED: "send_delivered_update",
    OrderStatus.CANCELLED: "send_cancelled_update",
}


class CheckoutNotAllowedError(Exception):
    pass


def checkout_line_items(order):
    """Stripe line items for an order, plus a shipping line so the charge equals `order.total`."""
    items = []
    subtotal = Decimal("0")
    for item in order.items:
        name = item.product.name if item.product else item.product_id
        items.append(CheckoutLineItem(name=name, unit_amount=to_minor_units(item.price), quantity=item.quantity))
        subtotal += Decimal(item.price) * item.quantity
    shipping = Decimal(order.total) - subtotal
    if shipping > 0:
        items.append(CheckoutLineItem(name="Shipping", unit_amount=to_minor_units(shipping), quantity=1))
    return items


def start_checkout(db: Session, order_id: str, settings, payments):
    """Create a checkout session for the order and store its id. Raises PaymentProviderError."""
    db_order = crud.get_order_detail(db, order_id)
    if not db_order:
        raise crud.OrderNotFoundError(order_id)
    session = payments.create_checkout_session(
        items=checkout_line_items(db_order),
        order_id=db_order.id,
        customer_email=db_order.email,
        success_url=f"{settings.frontend_url}/order-confirmation/{db_order.id}?session_id={{CHECKOUT_SESSION_ID}}",
        cancel_url=f"{settings.frontend_url}/checkout?canceled=true&order_id={db_order.id}",
    )
    crud.attach_checkout_session(db, db_order.id, session.session_id)
    return session


def place_order(db: Session, order: schemas.OrderCreate, user_id, settings, payments, mailer, notifier):
    """Place an order, open its checkout session and schedule the confirmation email.

    Domain errors from the transaction propagate. A payment-provider failure
    does not: the committed order is returned with `checkout_url=None` and a
    `checkout_error` so the client can retry checkout on its own.
    """
    db_order = crud.create_order(
        db,
        order,
        user_id=user_id,
        shipping_fee=settings.shipping_fee,
        apply_sale_price=settings.apply_sale_price,
        enforce_stock_check=settings.enforce_stock_check,
    )

    checkout_url = None
    checkout_error = None
    try:
        session = start_checkout(db, db_order.id, settings, payments)
        checkout_url = session.url
    except PaymentProviderError as e:
        logger.error(f"Checkout session for order {db_order.id} failed: {e}")
        checkout_error = CHECKOUT_RETRY_MESSAGE

    # the session id is stored before the confirmation is rendered
    detail = schemas.OrderDetail.model_validate(crud.get_order_detail(db, db_order.id))
    notifier.notify_async(mailer.send_order_confirmation, detail)

    return schemas.OrderPlaced(
        order_id=detail.id,
        total=detail.total,
        status=detail.status,
        payment_status=detail.payment_status,
        checkout_url=checkout_url,
        checkout_error=checkout_error,
    )


def retry_checkout(db: Session, order_id: str, settings, payments):
    """Open a new checkout session for an unpaid, pending order. Raises PaymentProviderError."""
    db_order = crud.get_order(db, order_id)
    if not db_order:
        raise crud.OrderNotFoundError(order_id)
    if db_order.status != OrderStatus.PENDING or db_order.payment_status != PaymentStatus.UNPAID:
        raise CheckoutNotAllowedError(
            f"Order {order_id} is {db_order.status.value}/{db_order.payment_status.value}; checkout is closed"
        )
    session = start_checkout(db, order_id, settings, payments)
    db_order = crud.get_order(db, order_id)
    return schemas.OrderPlaced(
        order_id=db_order.id,
        total=db_order.total,
        status=db_order.status,
        payment_status=db_order.payment_status,
        checkout_url=session.url,
    )


def change_status(db: Session, order_id: str, new_status: OrderStatus, settings, mailer, notifier):
    """Admin status transition; schedules the matching customer email when the status changed."""
    db_order, changed = crud.update_order_status(
        db, order_id, new_status, enforce_transition_graph=settings.enforce_transition_graph
    )
    detail = schemas.OrderDetail.model_validate(crud.get_order_detail(db, db_order.id))
    if changed and new_status in STATUS_EMAILS:
        notifier.notify_async(getattr(mailer, STATUS_EMAILS[new_status]), detail)
    return detail
