"""
Cart API Routes

The cart of one customer. Every change rewrites the whole cart under the
customer's version check; responses carry the cart as it was committed.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.app.services.cart_service import CartItemView, CartService
from src.app.services.tenant_router import ITenantHandles
from src.depends import get_fulfillment_options, get_tenant_handles

router = APIRouter(prefix="/customers/{customer_id}/cart", tags=["Cart"])


class AddCartItemRequest(BaseModel):
    product_id: UUID
    quantity: int = Field(default=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., description="Zero or less removes the line")


class CartResponse(BaseModel):
    items: List[CartItemView]
    total_amount: float

    @classmethod
    def from_views(cls, items: List[CartItemView]) -> "CartResponse":
        return cls(items=items, total_amount=round(sum(item.subtotal for item in items), 2))


def get_cart_service(
    handles: ITenantHandles = Depends(get_tenant_handles),
    options: dict = Depends(get_fulfillment_options),
) -> CartService:
    return CartService(handles.unit_of_work, **options)


@router.get("", response_model=CartResponse)
async def view_cart(customer_id: UUID, service: CartService = Depends(get_cart_service)):
    return CartResponse.from_views(await service.view(customer_id))


@router.delete("", response_model=CartResponse)
async def clear_cart(customer_id: UUID, service: CartService = Depends(get_cart_service)):
    return CartResponse.from_views(await service.clear(customer_id))


@router.post("/items", response_model=CartResponse)
async def add_cart_item(
    customer_id: UUID,
    request: AddCartItemRequest,
    service: CartService = Depends(get_cart_service),
):
    """
    Add To Cart

    Raises:
        - 400 Bad Request: INVALID_QUANTITY
        - 404 Not Found: CUSTOMER_NOT_FOUND, PRODUCT_NOT_FOUND
        - 409 Conflict: INSUFFICIENT_STOCK, CART_CONFLICT
    """
    items = await service.add_item(customer_id, request.product_id, request.quantity)
    return CartResponse.from_views(items)


@router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    customer_id: UUID,
    product_id: UUID,
    request: UpdateCartItemRequest,
    service: CartService = Depends(get_cart_service),
):
    items = await service.update_quantity(customer_id, product_id, request.quantity)
    return CartResponse.from_views(items)


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    customer_id: UUID,
    product_id: UUID,
    service: CartService = Depends(get_cart_service),
):
    return CartResponse.from_views(await service.remove_item(customer_id, product_id))
