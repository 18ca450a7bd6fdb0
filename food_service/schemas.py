from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DeliveryAddress(BaseModel):
    """Delivery details collected on the checkout page."""
    firstName: str
    lastName: str
    email: str
    street: str
    city: str
    state: str
    zipcode: str
    country: str
    phone: str


class CartLine(BaseModel):
    """One cart entry as submitted by the storefront. Extra catalog fields are ignored."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[Any] = Field(default=None, alias="_id")  # Malformed ids are skipped at pricing time.
    quantity: int = Field(gt=0)


class PlaceOrderRequest(BaseModel):
    userId: str
    items: List[CartLine]
    address: Dict[str, Any]


class VerifyOrderRequest(BaseModel):
    orderId: str
    success: Union[bool, str]

    def succeeded(self):
        if isinstance(self.success, bool):
            return self.success
        return self.success == "true"


class UserOrdersRequest(BaseModel):
    userId: str


class UpdateStatusRequest(BaseModel):
    orderId: str
    status: str


class FoodCreate(BaseModel):
    name: str
    description: str = ""
    price: float = Field(gt=0)
    category: str = ""


class FoodRemoveRequest(BaseModel):
    id: str


class CartItemRequest(BaseModel):
    userId: str
    itemId: str


class CartRequest(BaseModel):
    userId: str


class UserCreate(BaseModel):
    name: str
    email: str
