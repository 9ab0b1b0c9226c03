from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Category


class ICategoryRepository(ABC):
    """Category repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, category_id: UUID) -> Optional[Category]:
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[Category]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Category]:
        pass

    @abstractmethod
    async def create(self, category: Category) -> Category:
        pass

    @abstractmethod
    async def update(self, category: Category) -> Category:
        pass

    @abstractmethod
    async def delete(self, category: Category) -> None:
        pass
