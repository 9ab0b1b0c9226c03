from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Product


class IProductRepository(ABC):
    """Product repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, product_id: UUID) -> Optional[Product]:
        """Get product by ID"""
        pass

    @abstractmethod
    async def get_by_ids(self, product_ids: List[UUID]) -> List[Product]:
        """Get all products whose ID is in product_ids"""
        pass

    @abstractmethod
    async def get_by_sku(self, sku: str) -> Optional[Product]:
        """Get product by SKU"""
        pass

    @abstractmethod
    async def list_all(self, category_id: Optional[UUID] = None) -> List[Product]:
        """List products, optionally restricted to one category"""
        pass

    @abstractmethod
    async def create(self, product: Product) -> Product:
        pass

    @abstractmethod
    async def update(self, product: Product) -> Product:
        pass

    @abstractmethod
    async def delete(self, product: Product) -> None:
        pass

    @abstractmethod
    async def detach_category(self, category_id: UUID) -> int:
        """Clear category_id on every product of the category"""
        pass

    @abstractmethod
    async def reserve_stock(self, product_id: UUID, quantity: int) -> bool:
        """
        Decrement stock by quantity only if at least quantity is left.

        Returns False when no row was changed (product gone or stock
        already taken by a concurrent order).
        """
        pass

    @abstractmethod
    async def release_stock(self, product_id: UUID, quantity: int) -> bool:
        """Increment stock by quantity. Returns False if the product is gone"""
        pass
