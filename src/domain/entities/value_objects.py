"""
Embedded value objects

Cart lines, order line snapshots and shipping addresses are stored as JSON
inside their owning row. These pydantic models are the typed view of those
JSON payloads.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CartLine(BaseModel):
    """One line of a customer's embedded cart"""

    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int = Field(ge=1)


class OrderLine(BaseModel):
    """
    Snapshot of a product at order time.

    Copied field by field when the order is created and never re-read from
    the product afterwards.
    """

    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    sku: str
    price: float
    image: str
    quantity: int = Field(ge=1)

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class ShippingAddress(BaseModel):
    model_config = ConfigDict(frozen=True)

    street: str
    city: str
    state: Optional[str] = None
    zip_code: str
    country: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
