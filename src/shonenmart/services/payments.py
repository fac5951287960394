"""Stripe Checkout client and webhook signature verification."""
from dataclasses import dataclass
import hashlib
import hmac
import logging
import time

import stripe

logger = logging.getLogger(__name__)

SIGNATURE_TOLERANCE_SECONDS = 300


class PaymentProviderError(Exception):
    pass


@dataclass
class CheckoutLineItem:
    name: str
    unit_amount: int  # minor currency units
    quantity: int


@dataclass
class CheckoutSession:
    session_id: str
    url: str


class StripeCheckoutClient:
    """Creates Stripe Checkout sessions through the official SDK.

    `client` is a `stripe.StripeClient`; one is built from `secret_key` on
    first use, with a single attempt bounded by `timeout`.
    """

    def __init__(self, secret_key: str, currency: str = "usd", timeout: float = 10.0, client=None):
        self.secret_key = secret_key
        self.currency = currency
        self.timeout = timeout
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = stripe.StripeClient(
                self.secret_key,
                http_client=stripe.RequestsClient(timeout=self.timeout),
                max_network_retries=0,
            )
        return self._client

    def _params(self, items, order_id, customer_email, success_url, cancel_url):
        return {
            "mode": "payment",
            "payment_method_types": ["card"],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "customer_email": customer_email,
            "client_reference_id": order_id,
            "metadata": {"order_id": order_id},
            "line_items": [
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {"name": item.name},
                        "unit_amount": int(item.unit_amount),
                    },
                    "quantity": item.quantity,
                }
                for item in items
            ],
        }

    def create_checkout_session(self, items, order_id, customer_email, success_url, cancel_url) -> CheckoutSession:
        if not self.secret_key:
            raise PaymentProviderError("STRIPE_SECRET_KEY is not configured")
        params = self._params(items, order_id, customer_email, success_url, cancel_url)
        try:
            session = self.client.checkout.sessions.create(params=params)
        except stripe.StripeError as e:
            raise PaymentProviderError(f"Stripe request failed: {e.user_message or e}") from e
        logger.info(f"Created checkout session {session.id} for order {order_id}")
        return CheckoutSession(session_id=session.id, url=session.url)


def _parse_signature_header(header: str):
    timestamp = None
    signatures = []
    for part in header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1":
            signatures.append(value)
    return timestamp, signatures


def compute_signature(payload: bytes, secret: str, timestamp) -> str:
    signed = f"{timestamp}.".encode("utf-8") + payload
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def sign_payload(payload: bytes, secret: str, timestamp=None) -> str:
    """Build a `Stripe-Signature` header value for `payload`."""
    timestamp = int(time.time()) if timestamp is None else int(timestamp)
    return f"t={timestamp},v1={compute_signature(payload, secret, timestamp)}"


def verify_signature(payload: bytes, header: str, secret: str, tolerance: int = SIGNATURE_TOLERANCE_SECONDS, now=None) -> bool:
    """Check a `Stripe-Signature` header (`t=<ts>,v1=<hex>`) against the raw body."""
    timestamp, signatures = _parse_signature_header(header or "")
    if not timestamp or not signatures:
        return False
    try:
        ts = int(timestamp)
    except ValueError:
        return False
    now = time.time() if now is None else now
    if abs(now - ts) > tolerance:
        return False
    expected = compute_signature(payload, secret, ts)
    return any(hmac.compare_digest(expected, candidate) for candidate in signatures)
