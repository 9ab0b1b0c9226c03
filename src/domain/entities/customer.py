"""
Customer Entity

Shopper account inside a tenant scope, with the cart embedded in the row.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, SQLModel

from src.domain.base import utcnow
from .value_objects import CartLine


class Customer(SQLModel, table=True):
    """
    Customer entity.

    Business Rules:
    - email is unique within the tenant scope
    - cart is a JSON array of {product_id, quantity}, always replaced whole
    - version increases on every cart/order-history write; writers must
      present the version they read (optimistic concurrency)
    """

    __tablename__ = "customers"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=32)

    cart: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    order_history: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    version: int = Field(default=0)

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    @property
    def cart_lines(self) -> List[CartLine]:
        return [CartLine(**line) for line in (self.cart or [])]
