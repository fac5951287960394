from dataclasses import dataclass
from decimal import Decimal
import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> tuple:
    return tuple(item.strip().lower() for item in os.getenv(name, "").split(",") if item.strip())


@dataclass
class Settings:
    """Runtime configuration, read from the environment by `from_env`.

    The two `enforce_*` toggles and `apply_sale_price` default to the strict
    behaviour. Turning them off reproduces the storefront's legacy behaviour
    (no stock pre-check, free-form status changes, regular price only).
    """

    database_url: str = "sqlite:///./database.db"
    shipping_fee: Decimal = Decimal("10.00")
    currency: str = "usd"
    apply_sale_price: bool = True
    enforce_stock_check: bool = True
    enforce_transition_graph: bool = True
    transaction_timeout_ms: int = 5000
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    payment_timeout_seconds: float = 10.0
    resend_api_key: str = ""
    sender_email: str = "onboarding@resend.dev"
    sender_name: str = "Magnostadt"
    email_timeout_seconds: float = 10.0
    frontend_url: str = "http://localhost:5173"
    auth_secret: str = ""
    admin_emails: tuple = ()
    sitemap_ttl_seconds: int = 3600
    enable_test_routes: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./database.db"),
            shipping_fee=Decimal(os.getenv("SHIPPING_FEE", "10.00")),
            currency=os.getenv("CURRENCY", "usd"),
            apply_sale_price=_env_bool("APPLY_SALE_PRICE", True),
            enforce_stock_check=_env_bool("ENFORCE_STOCK_CHECK", True),
            enforce_transition_graph=_env_bool("ENFORCE_TRANSITION_GRAPH", True),
            transaction_timeout_ms=int(os.getenv("TRANSACTION_TIMEOUT_MS", "5000")),
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY", ""),
            stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET", ""),
            payment_timeout_seconds=float(os.getenv("PAYMENT_TIMEOUT_SECONDS", "10")),
            resend_api_key=os.getenv("RESEND_API_KEY", ""),
            sender_email=os.getenv("SENDER_EMAIL", "onboarding@resend.dev"),
            sender_name=os.getenv("SENDER_NAME", "Magnostadt"),
            email_timeout_seconds=float(os.getenv("EMAIL_TIMEOUT_SECONDS", "10")),
            frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/"),
            auth_secret=os.getenv("AUTH_SECRET", ""),
            admin_emails=_env_list("ADMIN_EMAILS"),
            sitemap_ttl_seconds=int(os.getenv("SITEMAP_TTL_SECONDS", "3600")),
            enable_test_routes=_env_bool("ENABLE_TEST_ROUTES", False),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
