import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from .. import database, models

logger = logging.getLogger(__name__)

# Mounted only when ENABLE_TEST_ROUTES is set
router = APIRouter(prefix="/test", tags=["test"])

# children before parents
RESET_ORDER = (
    models.WebhookEvent,
    models.OrderItem,
    models.Order,
    models.StockAlert,
    models.WishlistItem,
    models.Address,
    models.Product,
    models.AnimeSeries,
    models.Category,
    models.User,
)


@router.post("/reset-db", status_code=status.HTTP_204_NO_CONTENT, include_in_schema=False)
def reset_database(request: Request, db: Session = Depends(database.get_db)):
    """
    Clear all data from database tables. For testing purposes only.
    """
    try:
        for model in RESET_ORDER:
            db.query(model).delete()
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Database reset failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to reset database: {str(e)}")
    request.app.state.sitemap_cache.invalidate()
