from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.customer_repository import ICustomerRepository
from src.domain.base import utcnow
from src.domain.entities import Customer
from src.domain.errors import DuplicateField


class CustomerRepository(ICustomerRepository):
    """Customer repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, customer_id: UUID) -> Optional[Customer]:
        """Get customer by ID"""
        stmt = select(Customer).where(Customer.id == customer_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[Customer]:
        """Get customer by email address"""
        stmt = select(Customer).where(Customer.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _flush(self, customer: Customer) -> Customer:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateField("email", customer.email) from exc
        await self.session.refresh(customer)
        return customer

    async def create(self, customer: Customer) -> Customer:
        """Create a new customer"""
        self.session.add(customer)
        return await self._flush(customer)

    async def update(self, customer: Customer) -> Customer:
        """Write changed profile columns; cart and version are left alone"""
        customer.updated_at = utcnow()
        self.session.add(customer)
        return await self._flush(customer)

    async def replace_cart(
        self,
        customer: Customer,
        cart: List[Dict[str, Any]],
        order_history: Optional[List[str]] = None,
    ) -> bool:
        values: Dict[str, Any] = {
            "cart": cart,
            "version": Customer.version + 1,
            "updated_at": utcnow(),
        }
        if order_history is not None:
            values["order_history"] = order_history

        stmt = (
            update(Customer)
            .where(Customer.id == customer.id, Customer.version == customer.version)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return False

        await self.session.refresh(customer)
        return True
