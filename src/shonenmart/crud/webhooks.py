import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError as SAIntegrityError, OperationalError

from .. import models
from ..models import WebhookEvent, OrderStatus, PaymentStatus
from .exceptions import OrderNotFoundError, TransactionFailureError
from .orders import restore_stock

logger = logging.getLogger(__name__)

PROCESSED = "processed"
DUPLICATE = "duplicate"
SKIPPED = "skipped"


def record_webhook_event(db: Session, event_id: str, event_type=None) -> bool:
    """Add the event id to the current transaction. Returns False if it was already recorded.

    The row is only flushed; it commits together with whatever the event changes.
    """
    db.add(WebhookEvent(event_id=event_id, event_type=event_type))
    try:
        db.flush()
        return True
    except SAIntegrityError:
        db.rollback()
        return False


def _is_stale_session(db_order, session_id) -> bool:
    # a retried checkout replaces the session; events for the old one are ignored
    return bool(session_id and db_order.stripe_session_id and session_id != db_order.stripe_session_id)


def _locked_order(db: Session, order_id: str):
    db_order = (
        db.query(models.Order)
        .filter(models.Order.id == order_id)
        .with_for_update(nowait=False)
        .first()
    )
    if not db_order:
        raise OrderNotFoundError(order_id)
    return db_order


def process_checkout_completed(db: Session, event_id: str, order_id: str, session_id=None) -> str:
    """Idempotent handling of a completed checkout session.

    - Replayed event ids return DUPLICATE without touching the order.
    - The order is marked PAID only while it is still UNPAID; otherwise SKIPPED.
    - Events for a session other than the order's current one are SKIPPED.
    - Raises OrderNotFoundError if the order does not exist.
    """
    try:
        db_order = _locked_order(db, order_id)
        if not record_webhook_event(db, event_id, "checkout.session.completed"):
            return DUPLICATE
        if _is_stale_session(db_order, session_id):
            logger.info(f"Order {order_id}: ignoring completion of superseded session {session_id}")
            db.commit()
            return SKIPPED
        if db_order.payment_status != PaymentStatus.UNPAID:
            logger.info(f"Order {order_id} already {db_order.payment_status.value}; completion ignored")
            db.commit()
            return SKIPPED
        db_order.payment_status = PaymentStatus.PAID
        db.commit()
    except OperationalError as e:
        db.rollback()
        raise TransactionFailureError(str(e.orig)) from e
    except Exception:
        db.rollback()
        raise
    logger.info(f"Order {order_id} marked PAID (event {event_id})")
    return PROCESSED


def process_checkout_expired(db: Session, event_id: str, order_id: str, session_id=None) -> str:
    """Idempotent handling of an expired checkout session.

    While the order is UNPAID its stock is restored (unless an admin already
    cancelled it), payment becomes FAILED and the order CANCELLED. Expiry of a
    session that a checkout retry already replaced is SKIPPED.
    """
    try:
        db_order = _locked_order(db, order_id)
        if not record_webhook_event(db, event_id, "checkout.session.expired"):
            return DUPLICATE
        if _is_stale_session(db_order, session_id):
            logger.info(f"Order {order_id}: ignoring expiry of superseded session {session_id}")
            db.commit()
            return SKIPPED
        if db_order.payment_status != PaymentStatus.UNPAID:
            db.commit()
            return SKIPPED
        if db_order.status != OrderStatus.CANCELLED:
            restore_stock(db, db_order)
            db_order.status = OrderStatus.CANCELLED
        db_order.payment_status = PaymentStatus.FAILED
        db.commit()
    except OperationalError as e:
        db.rollback()
        raise TransactionFailureError(str(e.orig)) from e
    except Exception:
        db.rollback()
        raise
    logger.info(f"Order {order_id} cancelled after checkout expiry (event {event_id})")
    return PROCESSED
