from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from . import routers
from .config import Settings
from .database import Database
from .services.email import Mailer, ResendEmailClient
from .services.payments import StripeCheckoutClient
from .services.sitemap import SitemapCache

logger = logging.getLogger(__name__)


def create_app(settings=None, database=None, payments=None, mailer=None) -> FastAPI:
    """Build the application.

    Collaborators default to the real database, Stripe and Resend clients
    configured from `settings`; tests pass their own.
    """
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    database = database or Database(settings.database_url, settings.transaction_timeout_ms)
    payments = payments or StripeCheckoutClient(
        settings.stripe_secret_key,
        currency=settings.currency,
        timeout=settings.payment_timeout_seconds,
    )
    mailer = mailer or Mailer(
        ResendEmailClient(settings.resend_api_key, timeout=settings.email_timeout_seconds),
        sender_email=settings.sender_email,
        sender_name=settings.sender_name,
        frontend_url=settings.frontend_url,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create tables on startup
        database.create_all()
        logger.info("Database schema ready")
        yield
        database.dispose()

    app = FastAPI(title="Shonen-Mart Orders Service", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.payments = payments
    app.state.mailer = mailer
    app.state.sitemap_cache = SitemapCache(settings.sitemap_ttl_seconds)

    if settings.enable_test_routes:
        logger.warning("Test routes enabled; /test/reset-db wipes the database")
        app.include_router(routers.testing.router)

    app.include_router(routers.products.router)
    app.include_router(routers.catalog.router)
    app.include_router(routers.users.router)
    app.include_router(routers.orders.router)
    app.include_router(routers.webhooks.router)
    app.include_router(routers.wishlist.router)
    app.include_router(routers.stock_alerts.router)
    app.include_router(routers.addresses.router)
    app.include_router(routers.sitemap.router)

    @app.get("/")
    def health():
        return {"status": "ok", "service": "shonen-mart-orders"}

    return app


app = create_app()
