from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.order_repository import IOrderRepository
from src.domain.base import utcnow
from src.domain.entities import Order, OrderStatus


class OrderRepository(IOrderRepository):
    """Order repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, order_id: UUID) -> Optional[Order]:
        """Get order by ID"""
        stmt = select(Order).where(Order.id == order_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_customer(self, customer_id: UUID) -> List[Order]:
        """Get all orders of a customer, newest first"""
        stmt = (
            select(Order)
            .where(Order.customer_id == customer_id)
            .order_by(Order.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, order: Order) -> Order:
        """Persist a new order"""
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def transition_status(
        self, order: Order, expected: OrderStatus, new_status: OrderStatus
    ) -> bool:
        stmt = (
            update(Order)
            .where(Order.id == order.id, Order.status == expected)
            .values(status=new_status, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return False

        await self.session.refresh(order)
        return True
