import logging
import os

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Runtime configuration for the food ordering service."""
    database_url: str = "sqlite:///./food_service.db"
    frontend_url: str = "http://localhost:5174"

    # Hosted checkout provider.
    stripe_secret_key: str = ""
    stripe_api_base: str = "https://api.stripe.com"
    payment_timeout_seconds: float = Field(default=10.0, gt=0)

    # Pricing. All amounts below are in settlement-currency minor units (paise).
    settlement_currency: str = "inr"
    conversion_rate: float = Field(default=80.0, gt=0)  # USD -> INR
    delivery_fee_minor: int = Field(default=2 * 80 * 100, ge=0)
    minimum_order_minor: int = Field(default=5000, ge=0)

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            database_url=os.getenv("DATABASE_URL", defaults.database_url),
            frontend_url=os.getenv("FRONTEND_URL", defaults.frontend_url),
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY", defaults.stripe_secret_key),
            stripe_api_base=os.getenv("STRIPE_API_BASE", defaults.stripe_api_base),
            payment_timeout_seconds=os.getenv("PAYMENT_TIMEOUT_SECONDS", defaults.payment_timeout_seconds),
            settlement_currency=os.getenv("SETTLEMENT_CURRENCY", defaults.settlement_currency),
            conversion_rate=os.getenv("CONVERSION_RATE", defaults.conversion_rate),
            delivery_fee_minor=os.getenv("DELIVERY_FEE_MINOR", defaults.delivery_fee_minor),
            minimum_order_minor=os.getenv("MINIMUM_ORDER_MINOR", defaults.minimum_order_minor),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
        )


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
