import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .. import crud, database
from ..dependencies import get_settings
from ..services.payments import verify_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

HANDLERS = {
    "checkout.session.completed": crud.process_checkout_completed,
    "checkout.session.expired": crud.process_checkout_expired,
}


@router.post(
    "/stripe",
    responses={
        200: {"description": "Webhook accepted", "content": {"application/json": {"example": {"detail": "ok"}}}},
        400: {"description": "Bad Request", "content": {"application/json": {"example": {"detail": "invalid payload"}}}},
        401: {"description": "Invalid signature", "content": {"application/json": {"example": {"detail": "invalid signature"}}}},
    },
)
async def stripe_webhook(request: Request, db: Session = Depends(database.get_db), settings=Depends(get_settings)):
    """Webhook receiver for Stripe Checkout.

    Security:
    - Expects header `Stripe-Signature` of the form `t=<unix ts>,v1=<hex>`, where
      the hex digest is HMAC-SHA256 of `"<ts>.<raw body>"` keyed with
      STRIPE_WEBHOOK_SECRET. Signatures older than five minutes are rejected.

    Payload (example):
    {
      "id": "evt_123",
      "type": "checkout.session.completed",
      "data": {"object": {"id": "cs_test_1", "metadata": {"order_id": "9f1c2b"}}}
    }
    """
    sig_header = request.headers.get("Stripe-Signature")
    if not sig_header:
        raise HTTPException(status_code=401, detail="missing signature")

    body = await request.body()  # raw bytes

    secret = settings.stripe_webhook_secret
    if not secret:
        # Fail closed if secret isn't configured
        raise HTTPException(status_code=500, detail="webhook secret not configured")

    if not verify_signature(body, sig_header, secret):
        # Do not log secret or computed HMAC
        logger.warning("Rejected webhook with invalid signature")
        raise HTTPException(status_code=401, detail="invalid signature")

    try:
        payload = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid payload")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="invalid payload")

    event_type = payload.get("type")
    event_id = payload.get("id")
    handler = HANDLERS.get(event_type)
    if handler is None:
        # unknown event types: accept but ignore
        return {"detail": "ignored"}

    session = (payload.get("data") or {}).get("object") or {}
    order_id = (session.get("metadata") or {}).get("order_id") or session.get("client_reference_id")
    if not event_id or not order_id:
        raise HTTPException(status_code=400, detail="missing event id or order_id")

    try:
        outcome = handler(db, event_id, str(order_id), session_id=session.get("id"))
    except crud.OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except crud.TransactionFailureError:
        raise HTTPException(status_code=503, detail="Service temporarily unavailable, please try again")

    if outcome == crud.DUPLICATE:
        # replayed event
        return {"detail": "event already processed"}
    if outcome == crud.SKIPPED:
        return {"detail": "order already settled"}
    return {"detail": "ok"}
