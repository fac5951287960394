import logging

from sqlalchemy.orm import Session

from .. import crud, schemas

logger = logging.getLogger(__name__)


def notify_restock(db: Session, db_product, mailer, notifier):
    """Claim the product's pending stock alerts and schedule one email per alert."""
    product = schemas.Product.model_validate(db_product)
    alerts = crud.claim_restock_alerts(db, db_product.id)
    for alert in alerts:
        notifier.notify_async(mailer.send_back_in_stock, alert.email, product)
    return len(alerts)


def update_product(db: Session, product_id: str, data, partial: bool, mailer, notifier):
    """Apply an admin product edit; a restock from zero fires back-in-stock alerts.

    Returns None if the product does not exist. IntegrityError propagates.
    """
    existing = crud.get_product(db, product_id)
    if not existing:
        return None
    was_out_of_stock = existing.stock == 0
    if partial:
        db_product = crud.update_product_partial(db, product_id, data)
    else:
        db_product = crud.update_product(db, product_id, data)
    if was_out_of_stock and db_product.stock > 0:
        sent = notify_restock(db, db_product, mailer, notifier)
        logger.info(f"Product {product_id} restocked to {db_product.stock}; {sent} alert(s) scheduled")
    return db_product
