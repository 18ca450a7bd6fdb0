import logging
from dataclasses import dataclass
from typing import List

import requests

from .errors import PaymentGatewayError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineItem:
    """A priced line on the hosted checkout page. unit_amount is in minor units."""
    name: str
    unit_amount: int
    quantity: int
    currency: str


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str


def encode_checkout_form(line_items: List[LineItem], success_url, cancel_url):
    """Flatten a checkout session request into the provider's bracketed form fields."""
    form = {
        "mode": "payment",
        "success_url": success_url,
        "cancel_url": cancel_url,
    }
    for index, item in enumerate(line_items):
        prefix = f"line_items[{index}]"
        form[f"{prefix}[price_data][currency]"] = item.currency
        form[f"{prefix}[price_data][product_data][name]"] = item.name
        form[f"{prefix}[price_data][unit_amount]"] = str(item.unit_amount)
        form[f"{prefix}[quantity]"] = str(item.quantity)
    return form


class StripeCheckoutGateway:
    """
    Creates hosted checkout sessions through the Stripe REST API.
    Any transport error or non-2xx answer is raised as PaymentGatewayError.
    """

    def __init__(self, secret_key, api_base="https://api.stripe.com", timeout=10.0, session=None):
        self.secret_key = secret_key
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def create_checkout_session(self, line_items: List[LineItem], success_url, cancel_url) -> CheckoutSession:
        url = f"{self.api_base}/v1/checkout/sessions"
        try:
            response = self.session.post(
                url,
                data=encode_checkout_form(line_items, success_url, cancel_url),
                auth=(self.secret_key, ""),
                timeout=self.timeout,
            )
            response.raise_for_status()  # Raises an exception for 4xx/5xx status codes
            payload = response.json()
        except requests.exceptions.RequestException as e:
            logger.exception("Checkout session request to %s failed", url)
            raise PaymentGatewayError("Payment provider unavailable") from e
        except ValueError as e:
            logger.exception("Checkout session response from %s is not JSON", url)
            raise PaymentGatewayError("Payment provider unavailable") from e

        if not payload.get("id") or not payload.get("url"):
            logger.error("Checkout session response is missing id or url: %s", payload)
            raise PaymentGatewayError("Payment provider unavailable")

        logger.info("Created checkout session %s", payload["id"])
        return CheckoutSession(id=payload["id"], url=payload["url"])
