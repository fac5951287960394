from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from .. import crud, database, schemas
from ..auth import Caller, require_user

router = APIRouter(prefix="/stock-alerts", tags=["stock-alerts"])


@router.get("/", response_model=List[schemas.StockAlert])
def read_alerts(db: Session = Depends(database.get_db), caller: Caller = Depends(require_user)):
    """Alerts still waiting for a restock, newest first."""
    return crud.get_pending_alerts(db, caller.user_id)


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.StockAlert,
    responses={404: {"description": "Not Found", "content": {"application/json": {"example": {"detail": "Product not found"}}}}},
)
def subscribe(
    alert: schemas.StockAlertSubscribe,
    db: Session = Depends(database.get_db),
    caller: Caller = Depends(require_user),
):
    """Ask to be emailed when the product is back in stock.

    Subscribing again re-arms a previously sent alert.
    """
    try:
        return crud.subscribe(db, caller.user_id, alert.product_id, alert.email)
    except crud.ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")


@router.post("/status", response_model=schemas.StatusMap)
def alert_statuses(
    body: schemas.ProductIds,
    db: Session = Depends(database.get_db),
    caller: Caller = Depends(require_user),
):
    return crud.alert_statuses(db, caller.user_id, body.product_ids)


@router.get("/{product_id}/status")
def alert_status(product_id: str, db: Session = Depends(database.get_db), caller: Caller = Depends(require_user)):
    return {"product_id": product_id, "subscribed": crud.is_subscribed(db, caller.user_id, product_id)}


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def unsubscribe(product_id: str, db: Session = Depends(database.get_db), caller: Caller = Depends(require_user)):
    try:
        crud.unsubscribe(db, caller.user_id, product_id)
    except crud.NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
