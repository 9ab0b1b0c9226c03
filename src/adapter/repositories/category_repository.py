from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.category_repository import ICategoryRepository
from src.domain.entities import Category
from src.domain.errors import DuplicateField


class CategoryRepository(ICategoryRepository):
    """Category repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, category_id: UUID) -> Optional[Category]:
        stmt = select(Category).where(Category.id == category_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        stmt = select(Category).where(Category.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self) -> List[Category]:
        stmt = select(Category).order_by(Category.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _flush(self, category: Category) -> Category:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateField("slug", category.slug) from exc
        await self.session.refresh(category)
        return category

    async def create(self, category: Category) -> Category:
        self.session.add(category)
        return await self._flush(category)

    async def update(self, category: Category) -> Category:
        self.session.add(category)
        return await self._flush(category)

    async def delete(self, category: Category) -> None:
        await self.session.delete(category)
        await self.session.flush()
