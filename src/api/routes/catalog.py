"""
Catalog API Routes

Categories (by slug) and products (by SKU) of the shop named in the
X-Tenant-ID header.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from src.app.services.catalog_service import (
    CatalogService,
    CategoryChanges,
    CategoryInput,
    ProductChanges,
    ProductInput,
)
from src.app.services.tenant_router import ITenantHandles
from src.depends import get_tenant_handles
from src.domain.entities import Category, Product

router = APIRouter(tags=["Catalog"])


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    images: List[str]

    @classmethod
    def from_entity(cls, category: Category) -> "CategoryResponse":
        return cls(
            id=str(category.id),
            name=category.name,
            slug=category.slug,
            description=category.description,
            images=category.images or [],
        )


class ProductResponse(BaseModel):
    id: str
    sku: str
    name: str
    price: float
    stock: int
    category_id: Optional[str] = None
    description: str
    images: List[str]
    attributes: Dict[str, Any]

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        return cls(
            id=str(product.id),
            sku=product.sku,
            name=product.name,
            price=product.price,
            stock=product.stock,
            category_id=str(product.category_id) if product.category_id else None,
            description=product.description,
            images=product.images or [],
            attributes=product.attributes or {},
        )


def get_catalog_service(handles: ITenantHandles = Depends(get_tenant_handles)) -> CatalogService:
    return CatalogService(handles.unit_of_work)


# Categories


@router.post(
    "/categories", status_code=status.HTTP_201_CREATED, response_model=CategoryResponse
)
async def create_category(
    request: CategoryInput, service: CatalogService = Depends(get_catalog_service)
):
    return CategoryResponse.from_entity(await service.create_category(request))


@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(service: CatalogService = Depends(get_catalog_service)):
    return [CategoryResponse.from_entity(c) for c in await service.list_categories()]


@router.get("/categories/{slug}", response_model=CategoryResponse)
async def get_category(slug: str, service: CatalogService = Depends(get_catalog_service)):
    return CategoryResponse.from_entity(await service.get_category(slug))


@router.put("/categories/{slug}", response_model=CategoryResponse)
async def update_category(
    slug: str,
    request: CategoryChanges,
    service: CatalogService = Depends(get_catalog_service),
):
    return CategoryResponse.from_entity(await service.update_category(slug, request))


@router.delete("/categories/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(slug: str, service: CatalogService = Depends(get_catalog_service)):
    """Products of the category are kept and lose their category"""
    await service.delete_category(slug)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Products


@router.post("/products", status_code=status.HTTP_201_CREATED, response_model=ProductResponse)
async def create_product(
    request: ProductInput, service: CatalogService = Depends(get_catalog_service)
):
    return ProductResponse.from_entity(await service.create_product(request))


@router.get("/products", response_model=List[ProductResponse])
async def list_products(
    category: Optional[str] = None, service: CatalogService = Depends(get_catalog_service)
):
    products = await service.list_products(category_slug=category)
    return [ProductResponse.from_entity(p) for p in products]


@router.get("/products/{sku}", response_model=ProductResponse)
async def get_product(sku: str, service: CatalogService = Depends(get_catalog_service)):
    return ProductResponse.from_entity(await service.get_product(sku))


@router.put("/products/{sku}", response_model=ProductResponse)
async def update_product(
    sku: str,
    request: ProductChanges,
    service: CatalogService = Depends(get_catalog_service),
):
    return ProductResponse.from_entity(await service.update_product(sku, request))


@router.delete("/products/{sku}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(sku: str, service: CatalogService = Depends(get_catalog_service)):
    await service.delete_product(sku)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
