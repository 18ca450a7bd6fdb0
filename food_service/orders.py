"""
Order placement, payment verification and admin order management.

Placement prices the submitted cart against the catalog, stores the order,
clears the user's cart and opens a hosted checkout session. Verification is
driven by the outcome flag the checkout redirect carries back.
"""

import logging

from sqlalchemy.orm import Session

from .config import Settings
from .errors import BelowMinimumAmount, EmptyCart, InvalidIdentifier, OrderNotFound
from .models import Food, Order, User, is_valid_id
from .payments import LineItem

logger = logging.getLogger(__name__)

DELIVERY_LINE_NAME = "Delivery Charges"


def format_rupees(minor):
    """Render a minor-unit amount as plain rupees, e.g. 5000 -> "50", 5050 -> "50.50"."""
    rupees, paise = divmod(int(minor), 100)
    return f"{rupees}" if paise == 0 else f"{rupees}.{paise:02d}"


class OrderService:
    def __init__(self, db: Session, gateway, settings: Settings):
        self.db = db
        self.gateway = gateway
        self.settings = settings

    def to_minor_units(self, price):
        """Convert a catalog price to settlement-currency minor units."""
        return int(round(price * self.settings.conversion_rate * 100))

    def price_items(self, items):
        """
        Resolve cart lines against the catalog.

        Returns (line_items, snapshot, total_minor). Lines whose product id is
        malformed or unknown are skipped. The delivery line is always appended
        and counted in the total.
        """
        currency = self.settings.settlement_currency
        line_items = []
        snapshot = []
        total_minor = 0

        for item in items:
            product_id = item.get("_id")
            quantity = item.get("quantity", 0)
            if not is_valid_id(product_id):
                logger.warning("Skipping cart item with malformed id %r", product_id)
                continue

            product = self.db.get(Food, product_id)
            if product is None:
                logger.warning("Skipping cart item %s: not in catalog", product_id)
                continue

            unit_minor = self.to_minor_units(product.price)
            total_minor += unit_minor * quantity
            line_items.append(LineItem(product.name, unit_minor, quantity, currency))
            snapshot.append({"_id": product.id, "name": product.name, "price": product.price, "quantity": quantity})

        delivery_minor = self.settings.delivery_fee_minor
        line_items.append(LineItem(DELIVERY_LINE_NAME, delivery_minor, 1, currency))
        total_minor += delivery_minor

        return line_items, snapshot, total_minor

    def place_order(self, user_id, items, address):
        """Create an unpaid order and return the hosted checkout URL."""
        if not is_valid_id(user_id):
            raise InvalidIdentifier("Invalid User ID")
        if not items:
            raise EmptyCart("Cart is empty")

        line_items, snapshot, total_minor = self.price_items(items)

        if total_minor < self.settings.minimum_order_minor:
            floor = format_rupees(self.settings.minimum_order_minor)
            raise BelowMinimumAmount(f"Minimum order amount is ₹{floor}. Please add more items.")

        order = Order(user_id=user_id, items=snapshot, amount=total_minor / 100, address=address)
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        logger.info("Order %s placed by user %s for %s", order.id, user_id, order.amount)

        # Cart is cleared in its own commit; a crash here leaves the order with a full cart.
        user = self.db.get(User, user_id)
        if user is not None:
            user.cart_data = {}
            self.db.commit()

        frontend_url = self.settings.frontend_url.rstrip("/")
        session = self.gateway.create_checkout_session(
            line_items,
            success_url=f"{frontend_url}/verify?success=true&orderId={order.id}",
            cancel_url=f"{frontend_url}/verify?success=false&orderId={order.id}",
        )
        logger.info("Checkout session %s opened for order %s", session.id, order.id)
        return session.url

    def _get_order(self, order_id, invalid_message):
        if not is_valid_id(order_id):
            raise InvalidIdentifier(invalid_message)
        order = self.db.get(Order, order_id)
        if order is None:
            raise OrderNotFound("Order not found")
        return order

    def verify_order(self, order_id, success):
        """
        Finalize an order from the checkout redirect outcome.

        The flag is trusted as sent; it is not reconciled with the payment
        provider. Returns True when the order was marked paid, False when it
        was discarded.
        """
        order = self._get_order(order_id, "Invalid order ID")
        if success:
            order.payment = True
            self.db.commit()
            logger.info("Order %s marked as paid", order_id)
            return True

        self.db.delete(order)
        self.db.commit()
        logger.info("Order %s cancelled after failed payment", order_id)
        return False

    def user_orders(self, user_id):
        if not is_valid_id(user_id):
            raise InvalidIdentifier("Invalid User ID")
        return self.db.query(Order).filter(Order.user_id == user_id).order_by(Order.date).all()

    def list_orders(self):
        return self.db.query(Order).order_by(Order.date).all()

    def update_status(self, order_id, status):
        order = self._get_order(order_id, "Invalid Order ID")
        order.status = status
        self.db.commit()
        logger.info("Order %s status set to %r", order_id, status)
        return order
