"""
Order API Routes

Checkout, order history and cancellation for customers, plus the staff
status change. Every route runs inside the shop named by X-Tenant-ID.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.api.error import raise_for_error
from src.app.services.tenant_router import TenantDataRouter
from src.app.use_cases.orders import (
    CancelOrderUseCase,
    CreateOrderCommand,
    CreateOrderUseCase,
    GetCustomerOrdersUseCase,
    GetOrderUseCase,
    OrderResponse,
    UpdateOrderStatusCommand,
    UpdateOrderStatusUseCase,
)
from src.depends import get_fulfillment_options, get_scope_id, get_tenant_router

router = APIRouter(tags=["Orders"])


class CreateOrderRequest(BaseModel):
    shipping_address: Optional[Dict[str, Any]] = None
    contact_phone: Optional[str] = None


@router.post(
    "/customers/{customer_id}/orders",
    status_code=status.HTTP_201_CREATED,
    response_model=OrderResponse,
)
async def create_order(
    customer_id: UUID,
    request: CreateOrderRequest,
    scope_id: str = Depends(get_scope_id),
    tenant_router: TenantDataRouter = Depends(get_tenant_router),
    options: dict = Depends(get_fulfillment_options),
):
    """
    Create Order

    Converts the customer's cart into an order: stock is reserved and the
    cart is cleared in the same transaction.

    Raises:
        - 400 Bad Request: EMPTY_CART, INVALID_SHIPPING_INFO
        - 404 Not Found: CUSTOMER_NOT_FOUND
        - 409 Conflict: INSUFFICIENT_STOCK, PRODUCT_UNAVAILABLE, FULFILLMENT_CONFLICT
    """
    command = CreateOrderCommand(
        customer_id=customer_id,
        shipping_address=request.shipping_address,
        contact_phone=request.contact_phone,
    )
    result = await CreateOrderUseCase(tenant_router, **options).execute(scope_id, command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/customers/{customer_id}/orders", response_model=List[OrderResponse])
async def list_customer_orders(
    customer_id: UUID,
    scope_id: str = Depends(get_scope_id),
    tenant_router: TenantDataRouter = Depends(get_tenant_router),
):
    result = await GetCustomerOrdersUseCase(tenant_router).execute(scope_id, customer_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/customers/{customer_id}/orders/{order_id}", response_model=OrderResponse)
async def get_customer_order(
    customer_id: UUID,
    order_id: UUID,
    scope_id: str = Depends(get_scope_id),
    tenant_router: TenantDataRouter = Depends(get_tenant_router),
):
    result = await GetOrderUseCase(tenant_router).execute(scope_id, customer_id, order_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/customers/{customer_id}/orders/{order_id}/cancel", response_model=OrderResponse
)
async def cancel_customer_order(
    customer_id: UUID,
    order_id: UUID,
    scope_id: str = Depends(get_scope_id),
    tenant_router: TenantDataRouter = Depends(get_tenant_router),
    options: dict = Depends(get_fulfillment_options),
):
    """
    Cancel Order (customer)

    Raises:
        - 404 Not Found: ORDER_NOT_FOUND (also for another customer's order)
        - 409 Conflict: INVALID_ORDER_STATE
    """
    result = await CancelOrderUseCase(tenant_router, **options).execute(
        scope_id, order_id, customer_id=customer_id
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/orders/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: UUID,
    scope_id: str = Depends(get_scope_id),
    tenant_router: TenantDataRouter = Depends(get_tenant_router),
    options: dict = Depends(get_fulfillment_options),
):
    result = await CancelOrderUseCase(tenant_router, **options).execute(scope_id, order_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    command: UpdateOrderStatusCommand,
    scope_id: str = Depends(get_scope_id),
    tenant_router: TenantDataRouter = Depends(get_tenant_router),
    options: dict = Depends(get_fulfillment_options),
):
    """
    Update Order Status (staff)

    Raises:
        - 400 Bad Request: INVALID_ORDER_STATUS
        - 404 Not Found: ORDER_NOT_FOUND
        - 409 Conflict: INVALID_ORDER_STATE
    """
    result = await UpdateOrderStatusUseCase(tenant_router, **options).execute(
        scope_id, order_id, command
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value
