from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.product_repository import IProductRepository
from src.domain.base import utcnow
from src.domain.entities import Product
from src.domain.errors import DuplicateField


class ProductRepository(IProductRepository):
    """Product repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, product_id: UUID) -> Optional[Product]:
        """Get product by ID"""
        stmt = select(Product).where(Product.id == product_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, product_ids: List[UUID]) -> List[Product]:
        if not product_ids:
            return []
        stmt = select(Product).where(Product.id.in_(product_ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_sku(self, sku: str) -> Optional[Product]:
        """Get product by SKU"""
        stmt = select(Product).where(Product.sku == sku)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self, category_id: Optional[UUID] = None) -> List[Product]:
        stmt = select(Product)
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        stmt = stmt.order_by(Product.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _flush(self, product: Product) -> Product:
        # sku is unique per scope
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateField("sku", product.sku) from exc
        await self.session.refresh(product)
        return product

    async def create(self, product: Product) -> Product:
        self.session.add(product)
        return await self._flush(product)

    async def update(self, product: Product) -> Product:
        product.updated_at = utcnow()
        self.session.add(product)
        return await self._flush(product)

    async def delete(self, product: Product) -> None:
        await self.session.delete(product)
        await self.session.flush()

    async def detach_category(self, category_id: UUID) -> int:
        stmt = (
            update(Product)
            .where(Product.category_id == category_id)
            .values(category_id=None, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def reserve_stock(self, product_id: UUID, quantity: int) -> bool:
        # The stock guard sits in the WHERE clause so the check and the
        # decrement are one statement under the transaction's row lock.
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def release_stock(self, product_id: UUID, quantity: int) -> bool:
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock + quantity, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
