"""Pytest fixtures for integration tests."""
import json

import pytest
from fastapi.testclient import TestClient

from shonenmart import crud
from shonenmart.auth import sign_token
from shonenmart.config import Settings
from shonenmart.database import Database
from shonenmart.main import create_app
from shonenmart.models import UserRole
from shonenmart.services.email import Mailer
from shonenmart.services.payments import CheckoutSession, PaymentProviderError, sign_payload

AUTH_SECRET = "test-auth-secret"
WEBHOOK_SECRET = "whsec_test_123"


class FakeEmailClient:
    configured = True

    def __init__(self):
        self.sent = []

    def send(self, sender, to, subject, html):
        self.sent.append({"to": to, "subject": subject, "html": html})
        return f"email_{len(self.sent)}"


class FakePayments:
    def __init__(self):
        self.fail = False
        self.calls = []

    def create_checkout_session(self, items, order_id, customer_email, success_url, cancel_url):
        self.calls.append({"items": items, "order_id": order_id})
        if self.fail:
            raise PaymentProviderError("Stripe returned 500: unavailable")
        n = len(self.calls)
        return CheckoutSession(session_id=f"cs_test_{n}", url=f"https://checkout.stripe.com/c/pay/cs_test_{n}")


@pytest.fixture(scope="function")
def database():
    """Create an in-memory SQLite database for integration testing."""
    db_handle = Database("sqlite://")
    db_handle.create_all()
    yield db_handle
    db_handle.dispose()


@pytest.fixture(scope="function")
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def payments():
    return FakePayments()


@pytest.fixture
def email_client():
    return FakeEmailClient()


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        auth_secret=AUTH_SECRET,
        stripe_webhook_secret=WEBHOOK_SECRET,
        frontend_url="https://shop.example.com",
        enable_test_routes=True,
    )


@pytest.fixture(scope="function")
def app(settings, database, payments, email_client):
    mailer = Mailer(email_client, sender_email="orders@example.com", frontend_url=settings.frontend_url)
    return create_app(settings=settings, database=database, payments=payments, mailer=mailer)


@pytest.fixture(scope="function")
def client(app):
    """Create a test client bound to the test database and fake collaborators."""
    return TestClient(app)


@pytest.fixture
def user_headers():
    return {"Authorization": f"Bearer {sign_token('user_abc', AUTH_SECRET)}"}


@pytest.fixture
def admin_headers(db):
    crud.upsert_user(db, "admin_1", email="admin@example.com", role=UserRole.ADMIN)
    return {"Authorization": f"Bearer {sign_token('admin_1', AUTH_SECRET)}"}


@pytest.fixture
def create_product(client, admin_headers):
    """POST a product as admin and return the response body."""
    counter = {"n": 0}

    def _create(**overrides):
        counter["n"] += 1
        payload = {"slug": f"product-{counter['n']}", "name": f"Product {counter['n']}", "price": 25.0, "stock": 10}
        payload.update(overrides)
        response = client.post("/products/", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def order_body():
    def _build(*lines, email="buyer@example.com"):
        return {
            "customer_name": "Test Buyer",
            "email": email,
            "address": "1 Konoha St",
            "city": "Konoha",
            "zip_code": "00001",
            "items": [{"product_id": product_id, "quantity": quantity} for product_id, quantity in lines],
        }

    return _build

@pytest.fixture
def post_event(client):
    """POST a Stripe event signed with `secret` (the configured one by default)."""

    def _post(payload, secret=WEBHOOK_SECRET, timestamp=None):
        body = json.dumps(payload).encode("utf-8")
        return client.post(
            "/webhooks/stripe",
            content=body,
            headers={"Stripe-Signature": sign_payload(body, secret, timestamp), "Content-Type": "application/json"},
        )

    return _post
