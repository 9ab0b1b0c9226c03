from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Order, OrderStatus


class IOrderRepository(ABC):
    """Order repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, order_id: UUID) -> Optional[Order]:
        """Get order by ID"""
        pass

    @abstractmethod
    async def list_by_customer(self, customer_id: UUID) -> List[Order]:
        """Get all orders of a customer, newest first"""
        pass

    @abstractmethod
    async def create(self, order: Order) -> Order:
        """Persist a new order"""
        pass

    @abstractmethod
    async def transition_status(
        self, order: Order, expected: OrderStatus, new_status: OrderStatus
    ) -> bool:
        """
        Set status to new_status only if it is still expected.

        Returns False when another writer changed the status first.
        """
        pass
