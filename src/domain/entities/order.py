"""
Order Entity

Durable result of converting a customer's cart. Order lines are snapshots
and are never rewritten after creation.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import OrderStatus
from .value_objects import OrderLine

CANCELLABLE_STATUSES = frozenset({OrderStatus.pending, OrderStatus.confirmed})

# Administrative status transitions. Cancellation goes through the
# restocking path regardless of the caller.
ALLOWED_TRANSITIONS = {
    OrderStatus.pending: frozenset({OrderStatus.confirmed, OrderStatus.cancelled}),
    OrderStatus.confirmed: frozenset({OrderStatus.shipped, OrderStatus.cancelled}),
    OrderStatus.shipped: frozenset({OrderStatus.delivered, OrderStatus.returned}),
    OrderStatus.delivered: frozenset({OrderStatus.returned}),
    OrderStatus.cancelled: frozenset(),
    OrderStatus.returned: frozenset(),
}


class Order(SQLModel, table=True):
    """
    Order entity.

    Business Rules:
    - items is non-empty
    - total_amount equals the sum of price * quantity over items at creation
    - created exactly once by order fulfillment with status=pending
    - status changes only through administrative transitions or cancellation
    """

    __tablename__ = "orders"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    customer_id: UUID = Field(foreign_key="customers.id", nullable=False, index=True)

    items: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    total_amount: float = Field(default=0)
    status: OrderStatus = Field(default=OrderStatus.pending)

    shipping_address: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    contact_phone: str = Field(max_length=32)
    is_paid: bool = Field(default=False)
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_order_status", "status"),)

    @property
    def lines(self) -> List[OrderLine]:
        return [OrderLine(**item) for item in (self.items or [])]

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS.get(OrderStatus(self.status), frozenset())
