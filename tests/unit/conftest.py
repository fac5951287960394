"""Pytest fixtures for unit tests."""
from decimal import Decimal

import pytest

from shonenmart import crud, models, schemas
from shonenmart.config import Settings
from shonenmart.database import Database
from shonenmart.services.email import EmailDeliveryError, Mailer
from shonenmart.services.notifier import Notifier
from shonenmart.services.payments import CheckoutSession, PaymentProviderError


class FakeEmailClient:
    """Stands in for ResendEmailClient and records every message."""

    def __init__(self, configured=True, fail=False):
        self.configured = configured
        self.fail = fail
        self.sent = []

    def send(self, sender, to, subject, html):
        if self.fail:
            raise EmailDeliveryError("Resend returned 500: boom")
        self.sent.append({"from": sender, "to": to, "subject": subject, "html": html})
        return f"email_{len(self.sent)}"


class FakePayments:
    """Stands in for StripeCheckoutClient."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def create_checkout_session(self, items, order_id, customer_email, success_url, cancel_url):
        self.calls.append(
            {
                "items": items,
                "order_id": order_id,
                "customer_email": customer_email,
                "success_url": success_url,
                "cancel_url": cancel_url,
            }
        )
        if self.fail:
            raise PaymentProviderError("Stripe returned 500: unavailable")
        n = len(self.calls)
        return CheckoutSession(session_id=f"cs_test_{n}", url=f"https://checkout.stripe.com/c/pay/cs_test_{n}")


@pytest.fixture(scope="function")
def database():
    """In-memory SQLite database for unit testing."""
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
def settings():
    return Settings(frontend_url="https://shop.example.com")


@pytest.fixture
def email_client():
    return FakeEmailClient()


@pytest.fixture
def mailer(email_client, settings):
    return Mailer(email_client, sender_email="orders@example.com", frontend_url=settings.frontend_url)


@pytest.fixture
def payments():
    return FakePayments()


@pytest.fixture
def notifier():
    # no BackgroundTasks: jobs run inline
    return Notifier()


@pytest.fixture
def make_product(db):
    """Factory creating products with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "slug": f"product-{counter['n']}",
            "name": f"Product {counter['n']}",
            "price": Decimal("25.00"),
            "stock": 10,
        }
        product_id = overrides.pop("id", None)
        data.update(overrides)
        product = schemas.ProductCreate(**data)
        if product_id is None:
            return crud.create_product(db, product)
        db_product = models.Product(id=product_id, **product.model_dump())
        db.add(db_product)
        db.commit()
        db.refresh(db_product)
        return db_product

    return _make


@pytest.fixture
def order_payload():
    """Build an OrderCreate from `(product_id, quantity)` pairs."""

    def _build(*lines, email="buyer@example.com"):
        return schemas.OrderCreate(
            customer_name="Test Buyer",
            email=email,
            address="1 Konoha St",
            city="Konoha",
            zip_code="00001",
            items=[{"product_id": product_id, "quantity": quantity} for product_id, quantity in lines],
        )

    return _build


@pytest.fixture
def failing_payments():
    return FakePayments(fail=True)
