"""
Storefront checkout client.

Mirrors the checkout page: it guards against an empty cart or a missing
session token, shows a display-only subtotal in the catalog currency, submits
the order and hands back either the payment page to redirect to or the
message to show.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .schemas import DeliveryAddress

logger = logging.getLogger(__name__)

CART_PATH = "/cart"
DELIVERY_FEE = 2
GENERIC_ERROR = "Something went wrong."
TRANSPORT_ERROR = "Something went wrong. Please try again."


@dataclass
class CheckoutResult:
    redirect_url: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self):
        return self.redirect_url is not None and self.error is None


def build_order_items(food_list, cart_items):
    """Every catalog entry with a positive cart quantity, with that quantity attached."""
    items = []
    for food in food_list:
        quantity = cart_items.get(food["_id"], 0)
        if quantity > 0:
            items.append({**food, "quantity": quantity})
    return items


def subtotal(food_list, cart_items):
    return sum(food["price"] * cart_items.get(food["_id"], 0) for food in food_list if cart_items.get(food["_id"], 0) > 0)


def delivery_fee(amount):
    return 0 if amount == 0 else DELIVERY_FEE


def total(food_list, cart_items):
    amount = subtotal(food_list, cart_items)
    return amount + delivery_fee(amount)


class StorefrontClient:
    def __init__(self, base_url, token=None, session=None, timeout=8):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def place_order(self, user_id, address: DeliveryAddress, food_list, cart_items) -> CheckoutResult:
        if not self.token:
            return CheckoutResult(redirect_url=CART_PATH)

        items = build_order_items(food_list, cart_items)
        if not items:
            return CheckoutResult(error="Your cart is empty!")

        order_data = {
            "userId": user_id,
            "address": address.model_dump(),
            "items": items,
            "amount": total(food_list, cart_items),
        }

        try:
            response = self.session.post(
                f"{self.base_url}/api/order/place",
                json=order_data,
                headers={"token": self.token},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException:
            logger.exception("Order submission failed")
            return CheckoutResult(error=TRANSPORT_ERROR)

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            return CheckoutResult(error=body.get("message") or TRANSPORT_ERROR)
        if body.get("success"):
            return CheckoutResult(redirect_url=body["session_url"])
        return CheckoutResult(error=body.get("message") or GENERIC_ERROR)
