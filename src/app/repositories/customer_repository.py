from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.domain.entities import Customer


class ICustomerRepository(ABC):
    """Customer repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, customer_id: UUID) -> Optional[Customer]:
        """Get customer by ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Customer]:
        """Get customer by email address"""
        pass

    @abstractmethod
    async def create(self, customer: Customer) -> Customer:
        """Create a new customer"""
        pass

    @abstractmethod
    async def update(self, customer: Customer) -> Customer:
        """Persist profile changes"""
        pass

    @abstractmethod
    async def replace_cart(
        self,
        customer: Customer,
        cart: List[Dict[str, Any]],
        order_history: Optional[List[str]] = None,
    ) -> bool:
        """
        Replace the embedded cart (and optionally the order history) in one
        write, guarded by the version the customer was read with.

        Returns False when the row changed since it was read.
        """
        pass
