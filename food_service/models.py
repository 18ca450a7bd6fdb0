import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, String, Text
from sqlalchemy.ext.mutable import MutableDict

from .database import Base


def new_id():
    """Identity references are UUID4 hex strings."""
    return uuid.uuid4().hex


def is_valid_id(value):
    """True when value is a well-formed identity reference."""
    if not isinstance(value, str) or len(value) != 32:
        return False
    try:
        return uuid.UUID(hex=value).hex == value
    except ValueError:
        return False


# Defines the ORM model for a dish in the catalog.
class Food(Base):
    __tablename__ = "foods"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, default="")
    price = Column(Float, nullable=False)  # Unit price in the source currency (USD).
    category = Column(String, default="")

    def to_dict(self):
        return {
            "_id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
        }


# Defines the ORM model for a customer and their cart.
class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    cart_data = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)  # product id -> quantity

    def to_dict(self):
        return {"_id": self.id, "name": self.name, "email": self.email, "cartData": dict(self.cart_data or {})}


# Defines the ORM model for a placed order.
class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), index=True, nullable=False)
    items = Column(JSON, nullable=False)  # Snapshot of the priced items at placement time.
    amount = Column(Float, nullable=False)  # Total in settlement-currency major units, delivery included.
    address = Column(JSON, nullable=False)
    status = Column(String, nullable=False, default="Food Processing")
    date = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    payment = Column(Boolean, nullable=False, default=False)

    def to_dict(self):
        return {
            "_id": self.id,
            "userId": self.user_id,
            "items": self.items,
            "amount": self.amount,
            "address": self.address,
            "status": self.status,
            "date": self.date.isoformat() if self.date else None,
            "payment": self.payment,
        }
