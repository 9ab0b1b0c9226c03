"""
Product Entity

Catalog item inside a tenant scope.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import JSON, Column, DateTime, Field, SQLModel

from src.domain.base import utcnow


class Product(SQLModel, table=True):
    """
    Product entity.

    Business Rules:
    - sku is unique within the tenant scope, not globally
    - price >= 0 and stock >= 0, enforced by the table as well
    - stock is decremented by order creation and incremented by order
      cancellation; both go through conditional updates only
    """

    __tablename__ = "products"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    sku: str = Field(unique=True, index=True, max_length=100)
    name: str = Field(max_length=255)
    price: float = Field(default=0)
    stock: int = Field(default=0)
    category_id: Optional[UUID] = Field(default=None, foreign_key="categories.id", index=True)
    description: str = Field(default="")
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    attributes: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else "default-image-url.jpg"
