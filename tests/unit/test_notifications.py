"""Unit tests for the notifier and transactional emails."""
from decimal import Decimal

from fastapi import BackgroundTasks
import pytest
import requests
import resend

from shonenmart import crud, schemas
from shonenmart.services.email import EmailDeliveryError, Mailer, ResendEmailClient
from shonenmart.services.notifier import Notifier, run_detached


class TestNotifier:
    def test_inline_job_runs(self):
        calls = []
        Notifier().notify_async(calls.append, "hello")
        assert calls == ["hello"]

    def test_failing_job_is_swallowed_and_logged(self, caplog):
        def boom():
            raise EmailDeliveryError("Resend returned 500")

        run_detached(boom)

        assert "Detached job 'boom' failed" in caplog.text

    def test_background_tasks_defer_the_job(self):
        calls = []
        tasks = BackgroundTasks()

        Notifier(tasks).notify_async(calls.append, "later")

        assert calls == []
        assert len(tasks.tasks) == 1


class TestMailer:
    def _order(self, db, make_product, order_payload):
        product = make_product(name="<Sasuke> Figure", price=Decimal("30.00"))
        order = crud.create_order(db, order_payload((product.id, 1)))
        return schemas.OrderDetail.model_validate(crud.get_order_detail(db, order.id))

    def test_order_confirmation_escapes_html(self, db, make_product, order_payload, mailer, email_client):
        detail = self._order(db, make_product, order_payload)

        mailer.send_order_confirmation(detail)

        message = email_client.sent[0]
        assert message["from"] == "Magnostadt <orders@example.com>"
        assert "&lt;Sasuke&gt; Figure" in message["html"]
        assert "<Sasuke>" not in message["html"]
        assert "$40.00" in message["html"]
        assert f"https://shop.example.com/order-confirmation/{detail.id}" in message["html"]

    def test_unconfigured_client_skips_send(self, db, make_product, order_payload, caplog):
        detail = self._order(db, make_product, order_payload)
        mailer = Mailer(ResendEmailClient(""), sender_email="orders@example.com")

        assert mailer.send_cancelled_update(detail) is None
        assert "RESEND_API_KEY is missing" in caplog.text

    def test_back_in_stock(self, make_product, mailer, email_client):
        product = schemas.Product.model_validate(make_product(name="Zoro Katana"))

        mailer.send_back_in_stock("fan@example.com", product)

        assert email_client.sent[0]["to"] == "fan@example.com"
        assert email_client.sent[0]["subject"] == "Zoro Katana is back in stock!"
        assert f"/product/{product.id}" in email_client.sent[0]["html"]


class FakeResend:
    """Module-shaped stand-in for the `resend` SDK."""

    def __init__(self, error=None):
        self.api_key = None
        self.default_http_client = None
        self.error = error
        self.sent = []
        self.Emails = self

    def send(self, params):
        self.sent.append((self.api_key, params))
        if self.error:
            raise self.error
        return {"id": "email_1"}


class TestResendEmailClient:
    def test_send_passes_key_and_message(self):
        sdk = FakeResend()
        client = ResendEmailClient("re_test", timeout=4, sdk=sdk)

        message_id = client.send("Shop <orders@example.com>", "fan@example.com", "Hi", "<p>Hi</p>")

        assert message_id == "email_1"
        api_key, params = sdk.sent[0]
        assert api_key == "re_test"
        assert params == {"from": "Shop <orders@example.com>", "to": ["fan@example.com"], "subject": "Hi", "html": "<p>Hi</p>"}
        assert isinstance(sdk.default_http_client, resend.RequestsClient)

    def test_provider_error_becomes_delivery_error(self):
        sdk = FakeResend(error=requests.ConnectionError("refused"))

        with pytest.raises(EmailDeliveryError, match="refused"):
            ResendEmailClient("re_test", sdk=sdk).send("a@example.com", "b@example.com", "Hi", "")
