import logging

from sqlalchemy.orm import Session, selectinload

from .. import models
from .exceptions import NotFoundError, ProductNotFoundError
from .products import get_product

logger = logging.getLogger(__name__)


def _alert(db: Session, user_id: str, product_id: str):
    return (
        db.query(models.StockAlert)
        .filter(models.StockAlert.user_id == user_id, models.StockAlert.product_id == product_id)
        .first()
    )


def subscribe(db: Session, user_id: str, product_id: str, email: str):
    """Create the alert, or re-arm an existing one with a fresh email and `notified=False`."""
    if not get_product(db, product_id):
        raise ProductNotFoundError(product_id)
    db_alert = _alert(db, user_id, product_id)
    if db_alert:
        db_alert.email = email
        db_alert.notified = False
    else:
        db_alert = models.StockAlert(user_id=user_id, product_id=product_id, email=email, notified=False)
        db.add(db_alert)
    db.commit()
    db.refresh(db_alert)
    return db_alert


def unsubscribe(db: Session, user_id: str, product_id: str):
    db_alert = _alert(db, user_id, product_id)
    if not db_alert:
        raise NotFoundError(f"No stock alert for product {product_id}")
    db.delete(db_alert)
    db.commit()
    return db_alert


def is_subscribed(db: Session, user_id: str, product_id: str) -> bool:
    db_alert = _alert(db, user_id, product_id)
    return db_alert is not None and not db_alert.notified


def alert_statuses(db: Session, user_id: str, product_ids):
    pending = {
        product_id
        for (product_id,) in db.query(models.StockAlert.product_id).filter(
            models.StockAlert.user_id == user_id,
            models.StockAlert.notified.is_(False),
            models.StockAlert.product_id.in_(list(product_ids)),
        )
    }
    return {product_id: product_id in pending for product_id in product_ids}


def get_pending_alerts(db: Session, user_id: str):
    return (
        db.query(models.StockAlert)
        .options(selectinload(models.StockAlert.product))
        .filter(models.StockAlert.user_id == user_id, models.StockAlert.notified.is_(False))
        .order_by(models.StockAlert.created_at.desc(), models.StockAlert.id.desc())
        .all()
    )


def claim_restock_alerts(db: Session, product_id: str):
    """Mark every pending alert for the product as notified and return them.

    Each returned alert is owed exactly one back-in-stock email.
    """
    alerts = (
        db.query(models.StockAlert)
        .filter(models.StockAlert.product_id == product_id, models.StockAlert.notified.is_(False))
        .with_for_update(nowait=False)
        .all()
    )
    for db_alert in alerts:
        db_alert.notified = True
    db.commit()
    logger.info(f"Claimed {len(alerts)} back-in-stock alert(s) for product {product_id}")
    return alerts
