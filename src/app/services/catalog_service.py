"""
Catalog Service

Category and product management inside one tenant scope. Categories are
addressed by slug and products by SKU; both are unique per scope only.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from src.app.services.unit_of_work import TenantUnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Category, Product
from src.domain.errors import CategoryNotFound, DuplicateField, ProductNotFound
from src.domain.scope import slugify

logger = logging.getLogger(__name__)


class CategoryInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    images: List[str] = Field(default_factory=list)


class CategoryChanges(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    images: Optional[List[str]] = None


class ProductInput(BaseModel):
    sku: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)
    stock: int = Field(default=0, ge=0)
    category_slug: Optional[str] = None
    description: str = ""
    images: List[str] = Field(default_factory=list)
    attributes: Dict[str, Any] = Field(default_factory=dict)


class ProductChanges(BaseModel):
    sku: Optional[str] = Field(default=None, min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    category_slug: Optional[str] = None
    description: Optional[str] = None
    images: Optional[List[str]] = None
    attributes: Optional[Dict[str, Any]] = None


class CatalogService:
    def __init__(self, uow_factory: Callable[[], TenantUnitOfWork]):
        self.uow_factory = uow_factory

    # Categories

    async def _category(self, uow: TenantUnitOfWork, slug: str) -> Category:
        category = await uow.categories.get_by_slug(slug)
        if category is None:
            raise CategoryNotFound(slug)
        return category

    async def create_category(self, data: CategoryInput) -> Category:
        slug = data.slug or slugify(data.name)
        uow = self.uow_factory()
        async with uow:
            if await uow.categories.get_by_slug(slug):
                raise DuplicateField("slug", slug)

            category = await uow.categories.create(
                Category(
                    name=data.name,
                    slug=slug,
                    description=data.description,
                    images=data.images,
                )
            )
            await uow.commit()

        logger.info(f"Category {slug} created")
        return category

    async def list_categories(self) -> List[Category]:
        uow = self.uow_factory()
        async with uow:
            return await uow.categories.list_all()

    async def get_category(self, slug: str) -> Category:
        uow = self.uow_factory()
        async with uow:
            return await self._category(uow, slug)

    async def update_category(self, slug: str, changes: CategoryChanges) -> Category:
        values = changes.model_dump(exclude_unset=True)
        uow = self.uow_factory()
        async with uow:
            category = await self._category(uow, slug)

            new_slug = values.get("slug")
            if new_slug and new_slug != category.slug:
                if await uow.categories.get_by_slug(new_slug):
                    raise DuplicateField("slug", new_slug)

            for field, value in values.items():
                if value is not None:
                    setattr(category, field, value)
            category.updated_at = utcnow()
            category = await uow.categories.update(category)
            await uow.commit()
            return category

    async def delete_category(self, slug: str) -> int:
        """Delete a category; its products stay, without a category"""
        uow = self.uow_factory()
        async with uow:
            category = await self._category(uow, slug)
            detached = await uow.products.detach_category(category.id)
            await uow.categories.delete(category)
            await uow.commit()

        logger.info(f"Category {slug} deleted, {detached} product(s) detached")
        return detached

    # Products

    async def _product(self, uow: TenantUnitOfWork, sku: str) -> Product:
        product = await uow.products.get_by_sku(sku)
        if product is None:
            raise ProductNotFound(sku)
        return product

    async def create_product(self, data: ProductInput) -> Product:
        uow = self.uow_factory()
        async with uow:
            if await uow.products.get_by_sku(data.sku):
                raise DuplicateField("sku", data.sku)

            category_id = None
            if data.category_slug:
                category_id = (await self._category(uow, data.category_slug)).id

            product = await uow.products.create(
                Product(
                    sku=data.sku,
                    name=data.name,
                    price=data.price,
                    stock=data.stock,
                    category_id=category_id,
                    description=data.description,
                    images=data.images,
                    attributes=data.attributes,
                )
            )
            await uow.commit()

        logger.info(f"Product {data.sku} created with stock {data.stock}")
        return product

    async def list_products(self, category_slug: Optional[str] = None) -> List[Product]:
        uow = self.uow_factory()
        async with uow:
            category_id = None
            if category_slug:
                category_id = (await self._category(uow, category_slug)).id
            return await uow.products.list_all(category_id=category_id)

    async def get_product(self, sku: str) -> Product:
        uow = self.uow_factory()
        async with uow:
            return await self._product(uow, sku)

    async def update_product(self, sku: str, changes: ProductChanges) -> Product:
        values = changes.model_dump(exclude_unset=True)
        uow = self.uow_factory()
        async with uow:
            product = await self._product(uow, sku)

            new_sku = values.get("sku")
            if new_sku and new_sku != product.sku:
                if await uow.products.get_by_sku(new_sku):
                    raise DuplicateField("sku", new_sku)

            if "category_slug" in values:
                category_slug = values.pop("category_slug")
                product.category_id = (
                    (await self._category(uow, category_slug)).id if category_slug else None
                )

            for field, value in values.items():
                if value is not None:
                    setattr(product, field, value)
            product = await uow.products.update(product)
            await uow.commit()
            return product

    async def delete_product(self, sku: str) -> None:
        uow = self.uow_factory()
        async with uow:
            product = await self._product(uow, sku)
            await uow.products.delete(product)
            await uow.commit()

        logger.info(f"Product {sku} deleted")
