"""Transactional email through the Resend SDK."""
import logging

import requests
import resend

from . import templates

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    pass


class ResendEmailClient:
    """Thin wrapper over `resend.Emails.send`.

    The SDK reads its key and HTTP client from module state, so both are set
    before every send.
    """

    def __init__(self, api_key: str, timeout: float = 10.0, sdk=None):
        self.api_key = api_key
        self.timeout = timeout
        self.sdk = sdk or resend

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def send(self, sender: str, to: str, subject: str, html: str):
        self.sdk.api_key = self.api_key
        self.sdk.default_http_client = resend.RequestsClient(timeout=int(self.timeout))
        params = {"from": sender, "to": [to], "subject": subject, "html": html}
        try:
            sent = self.sdk.Emails.send(params)
        except (resend.exceptions.ResendError, requests.RequestException) as e:
            raise EmailDeliveryError(f"Resend request failed: {e}") from e
        return sent.get("id")


class Mailer:
    """Renders and sends the storefront's transactional emails.

    Methods raise EmailDeliveryError on provider failures; callers schedule
    them through `Notifier.notify_async`, which logs and drops the error.
    """

    def __init__(self, client, sender_email: str, sender_name: str = "Magnostadt", frontend_url: str = ""):
        self.client = client
        self.sender = f"{sender_name} <{sender_email}>"
        self.frontend_url = frontend_url

    def _send(self, to: str, subject: str, html: str):
        if not self.client.configured:
            logger.warning(f"RESEND_API_KEY is missing. Email '{subject}' not sent.")
            return None
        message_id = self.client.send(self.sender, to, subject, html)
        logger.info(f"Sent '{subject}' to {to} ({message_id})")
        return message_id

    def send_order_confirmation(self, order):
        html = templates.order_confirmation(order, self.frontend_url)
        return self._send(order.email, f"Order Confirmation #{order.id}", html)

    def send_shipping_update(self, order):
        html = templates.shipping_update(order, self.frontend_url)
        return self._send(order.email, f"Your Order #{order.id} has Shipped!", html)

    def send_delivered_update(self, order):
        html = templates.delivered(order, self.frontend_url)
        return self._send(order.email, f"Order #{order.id} Delivered!", html)

    def send_cancelled_update(self, order):
        html = templates.cancelled(order, self.frontend_url)
        return self._send(order.email, f"Order #{order.id} Cancelled", html)

    def send_back_in_stock(self, email: str, product):
        html = templates.back_in_stock(product, self.frontend_url)
        return self._send(email, f"{product.name} is back in stock!", html)
