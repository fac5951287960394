from typing import List
import logging
import random
import time

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from .. import crud, database, models, schemas
from ..auth import Caller, get_caller, require_admin, require_user
from ..dependencies import get_mailer, get_notifier, get_payments, get_settings
from ..services import orders as order_service
from ..services.payments import PaymentProviderError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])

MAX_RETRIES = 3
BASE_DELAY = 0.01  # 10ms

NOT_FOUND = {"description": "Not Found", "content": {"application/json": {"example": {"detail": "Order not found"}}}}
FORBIDDEN = {"description": "Forbidden", "content": {"application/json": {"example": {"detail": "Admin access required"}}}}


@router.post(
    "/",
    response_model=schemas.OrderPlaced,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Order placed", "content": {"application/json": {"example": schemas.OrderPlaced.model_config["json_schema_extra"]["example"]}}},
        404: {"description": "Product not found", "content": {"application/json": {"example": {"detail": "Product prod_1 not found"}}}},
        409: {"description": "Insufficient stock", "content": {"application/json": {"example": {"detail": "Product prod_1 (Naruto Headband) only has 1 left in stock"}}}},
        503: {"description": "Database busy", "content": {"application/json": {"example": {"detail": "Service temporarily unavailable, please try again"}}}},
    },
)
def create_order(
    order: schemas.OrderCreate,
    response: Response,
    db: Session = Depends(database.get_db),
    caller: Caller = Depends(get_caller),
    settings=Depends(get_settings),
    payments=Depends(get_payments),
    mailer=Depends(get_mailer),
    notifier=Depends(get_notifier),
):
    """Place an order for a guest or a signed-in customer.

    Stock is validated and decremented in one transaction, so either every
    line is reserved or nothing is. The checkout session is opened after the
    commit; if the payment provider fails the order still exists and the
    response carries `checkout_error` instead of `checkout_url`.

    Transient lock conflicts are retried with exponential backoff.
    """
    for attempt in range(MAX_RETRIES):
        try:
            placed = order_service.place_order(
                db, order, caller.user_id, settings, payments, mailer, notifier
            )
            response.headers["Location"] = f"/orders/{placed.order_id}"
            return placed
        except crud.ProductNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except crud.InsufficientStockError as e:
            # business error, not transient
            raise HTTPException(status_code=409, detail=str(e))
        except crud.TransactionFailureError as e:
            if attempt < MAX_RETRIES - 1:
                # Exponential backoff with jitter
                delay = BASE_DELAY * (2 ** attempt) + random.uniform(0, 0.01)
                logger.warning(f"Order placement attempt {attempt + 1} failed ({e}); retrying in {delay:.3f}s")
                time.sleep(delay)
                continue
            logger.error(f"Order placement gave up after {MAX_RETRIES} attempts: {e}")
            raise HTTPException(status_code=503, detail="Service temporarily unavailable, please try again")

    raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/", response_model=List[schemas.OrderDetail], responses={403: FORBIDDEN})
def read_orders(db: Session = Depends(database.get_db), caller: Caller = Depends(require_admin)):
    """All orders, newest first (admin)."""
    return crud.list_orders(db)


@router.get(
    "/mine",
    response_model=List[schemas.OrderDetail],
    responses={401: {"description": "Unauthorized", "content": {"application/json": {"example": {"detail": "Not authenticated"}}}}},
)
def read_my_orders(db: Session = Depends(database.get_db), caller: Caller = Depends(require_user)):
    return crud.list_orders(db, user_id=caller.user_id)


@router.get("/{order_id}", response_model=schemas.OrderDetail, responses={404: NOT_FOUND})
def read_order(order_id: str, db: Session = Depends(database.get_db)):
    """Order with its items and their products, for the confirmation page."""
    db_order = crud.get_order_detail(db, order_id)
    if not db_order:
        raise HTTPException(status_code=404, detail="Order not found")
    return db_order


@router.put(
    "/{order_id}/status",
    response_model=schemas.OrderDetail,
    responses={
        400: {"description": "Invalid state transition", "content": {"application/json": {"example": {"detail": "Invalid transition from DELIVERED to PENDING"}}}},
        403: FORBIDDEN,
        404: NOT_FOUND,
    },
)
def update_order_status(
    order_id: str,
    status: str = Body(..., embed=True),
    db: Session = Depends(database.get_db),
    caller: Caller = Depends(require_admin),
    settings=Depends(get_settings),
    mailer=Depends(get_mailer),
    notifier=Depends(get_notifier),
):
    """Move an order through fulfilment (admin).

    Allowed transitions:
    - PENDING -> SHIPPED | CANCELLED
    - SHIPPED -> DELIVERED | CANCELLED
    - DELIVERED -> (no transitions)
    - CANCELLED -> (no transitions)

    Cancelling puts every item's quantity back in stock. Setting the current
    status again changes nothing.
    """
    try:
        new_status = models.OrderStatus(status)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid status")
    try:
        return order_service.change_status(db, order_id, new_status, settings, mailer, notifier)
    except crud.OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except crud.InvalidTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except crud.TransactionFailureError:
        raise HTTPException(status_code=503, detail="Service temporarily unavailable, please try again")


@router.post(
    "/{order_id}/checkout",
    response_model=schemas.OrderPlaced,
    responses={
        404: NOT_FOUND,
        409: {"description": "Checkout closed", "content": {"application/json": {"example": {"detail": "Order 9f1c2b is SHIPPED/PAID; checkout is closed"}}}},
        502: {"description": "Payment provider error", "content": {"application/json": {"example": {"detail": "Payment session could not be created"}}}},
    },
)
def retry_checkout(
    order_id: str,
    db: Session = Depends(database.get_db),
    settings=Depends(get_settings),
    payments=Depends(get_payments),
):
    """Open a fresh checkout session for a pending, unpaid order."""
    try:
        return order_service.retry_checkout(db, order_id, settings, payments)
    except crud.OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except order_service.CheckoutNotAllowedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PaymentProviderError as e:
        logger.error(f"Checkout retry for order {order_id} failed: {e}")
        raise HTTPException(status_code=502, detail="Payment session could not be created")
