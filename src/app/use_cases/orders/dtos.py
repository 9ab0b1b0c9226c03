"""
Order Use Case DTOs (Data Transfer Objects)
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.domain.entities import Order


# ============================================================================
# Command DTOs
# ============================================================================


class CreateOrderCommand(BaseModel):
    """
    Checkout request. The address stays a plain mapping so that missing or
    blank fields surface as INVALID_SHIPPING_INFO, not as a schema error.
    """

    customer_id: UUID
    shipping_address: Optional[Dict[str, Any]] = None
    contact_phone: Optional[str] = None


class UpdateOrderStatusCommand(BaseModel):
    status: str = Field(..., min_length=1)


# ============================================================================
# Response DTOs
# ============================================================================


class OrderLineResponse(BaseModel):
    product_id: str
    name: str
    sku: str
    price: float
    image: str
    quantity: int
    subtotal: float


class OrderResponse(BaseModel):
    id: str
    customer_id: str
    items: List[OrderLineResponse]
    total_amount: float
    status: str
    shipping_address: Dict[str, Any]
    contact_phone: str
    is_paid: bool
    notes: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            customer_id=str(order.customer_id),
            items=[
                OrderLineResponse(**line.model_dump(), subtotal=round(line.subtotal, 2))
                for line in order.lines
            ],
            total_amount=order.total_amount,
            status=getattr(order.status, "value", order.status),
            shipping_address=order.shipping_address or {},
            contact_phone=order.contact_phone,
            is_paid=order.is_paid,
            notes=order.notes,
            created_at=order.created_at.isoformat(),
            updated_at=order.updated_at.isoformat() if order.updated_at else None,
        )
