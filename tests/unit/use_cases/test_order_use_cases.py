"""
Unit tests for order use cases
The router is mocked; the engine runs against a mocked tenant unit of work.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from src.app.use_cases.orders import (
    CancelOrderUseCase,
    CreateOrderCommand,
    CreateOrderUseCase,
    GetCustomerOrdersUseCase,
    GetOrderUseCase,
    UpdateOrderStatusCommand,
    UpdateOrderStatusUseCase,
)
from src.domain.entities import Customer, Order, OrderStatus, Product
from src.domain.errors import ScopeUnavailable

SCOPE_ID = "db_acme_1a2b3c4d"
ADDRESS = {"street": "1 Main St", "city": "Springfield", "zip_code": "12345"}
PHONE = "+1 555 123 4567"


@pytest.fixture
def router(mock_uow):
    handles = MagicMock()
    handles.scope_id = SCOPE_ID
    handles.unit_of_work = MagicMock(return_value=mock_uow)
    router = MagicMock()
    router.handles_for = AsyncMock(return_value=handles)
    return router


def make_order(customer_id, status=OrderStatus.pending):
    return Order(
        id=uuid4(),
        customer_id=customer_id,
        items=[
            {
                "product_id": str(uuid4()),
                "name": "Widget",
                "sku": "W-1",
                "price": 5.0,
                "image": "",
                "quantity": 2,
            }
        ],
        total_amount=10.0,
        status=status,
        shipping_address=ADDRESS,
        contact_phone=PHONE,
    )


@pytest.mark.asyncio
async def test_create_order_use_case_success(router, mock_uow):
    # Arrange
    product = Product(id=uuid4(), sku="W-1", name="Widget", price=5.0, stock=3)
    customer = Customer(
        id=uuid4(),
        email="c@example.com",
        password_hash="x" * 60,
        cart=[{"product_id": str(product.id), "quantity": 2}],
    )
    mock_uow.customers.get_by_id = AsyncMock(return_value=customer)
    mock_uow.products.get_by_id = AsyncMock(return_value=product)
    mock_uow.products.reserve_stock = AsyncMock(return_value=True)
    mock_uow.orders.create = AsyncMock(side_effect=lambda order: order)
    mock_uow.customers.replace_cart = AsyncMock(return_value=True)

    command = CreateOrderCommand(
        customer_id=customer.id, shipping_address=ADDRESS, contact_phone=PHONE
    )

    # Act
    result = await CreateOrderUseCase(router).execute(SCOPE_ID, command)

    # Assert
    assert result.is_ok()
    assert result.value.status == "pending"
    assert result.value.total_amount == 10.0
    assert result.value.items[0].sku == "W-1"
    assert result.value.is_paid is False
    router.handles_for.assert_awaited_once_with(SCOPE_ID)
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_order_use_case_empty_cart(router, mock_uow):
    customer = Customer(id=uuid4(), email="c@example.com", password_hash="x" * 60, cart=[])
    mock_uow.customers.get_by_id = AsyncMock(return_value=customer)

    command = CreateOrderCommand(
        customer_id=customer.id, shipping_address=ADDRESS, contact_phone=PHONE
    )
    result = await CreateOrderUseCase(router).execute(SCOPE_ID, command)

    assert result.is_err()
    assert result.error.code == "EMPTY_CART"
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_order_use_case_scope_unavailable(router):
    router.handles_for = AsyncMock(side_effect=ScopeUnavailable(SCOPE_ID, "storage offline"))

    command = CreateOrderCommand(customer_id=uuid4(), shipping_address=ADDRESS, contact_phone=PHONE)
    result = await CreateOrderUseCase(router).execute(SCOPE_ID, command)

    assert result.is_err()
    assert result.error.code == "SCOPE_UNAVAILABLE"


@pytest.mark.asyncio
async def test_cancel_order_use_case(router, mock_uow):
    customer_id = uuid4()
    order = make_order(customer_id)
    mock_uow.orders.get_by_id = AsyncMock(return_value=order)
    mock_uow.orders.transition_status = AsyncMock(return_value=True)
    mock_uow.products.release_stock = AsyncMock(return_value=True)

    result = await CancelOrderUseCase(router).execute(SCOPE_ID, order.id, customer_id)

    assert result.is_ok()
    mock_uow.orders.transition_status.assert_awaited_once_with(
        order, OrderStatus.pending, OrderStatus.cancelled
    )
    mock_uow.products.release_stock.assert_awaited_once()


@pytest.mark.asyncio
async def test_cancel_order_use_case_shipped(router, mock_uow):
    customer_id = uuid4()
    order = make_order(customer_id, status=OrderStatus.shipped)
    mock_uow.orders.get_by_id = AsyncMock(return_value=order)

    result = await CancelOrderUseCase(router).execute(SCOPE_ID, order.id, customer_id)

    assert result.is_err()
    assert result.error.code == "INVALID_ORDER_STATE"


@pytest.mark.asyncio
async def test_update_order_status_use_case_invalid_status(router):
    result = await UpdateOrderStatusUseCase(router).execute(
        SCOPE_ID, uuid4(), UpdateOrderStatusCommand(status="lost")
    )

    assert result.is_err()
    assert result.error.code == "INVALID_ORDER_STATUS"


@pytest.mark.asyncio
async def test_update_order_status_use_case_confirm(router, mock_uow):
    order = make_order(uuid4())
    mock_uow.orders.get_by_id = AsyncMock(return_value=order)

    async def transition(order, current, target):
        order.status = target
        return True

    mock_uow.orders.transition_status = AsyncMock(side_effect=transition)

    result = await UpdateOrderStatusUseCase(router).execute(
        SCOPE_ID, order.id, UpdateOrderStatusCommand(status="confirmed")
    )

    assert result.is_ok()
    assert result.value.status == "confirmed"


@pytest.mark.asyncio
async def test_get_customer_orders_use_case(router, mock_uow):
    customer = Customer(id=uuid4(), email="c@example.com", password_hash="x" * 60)
    orders = [make_order(customer.id), make_order(customer.id)]
    mock_uow.customers.get_by_id = AsyncMock(return_value=customer)
    mock_uow.orders.list_by_customer = AsyncMock(return_value=orders)

    result = await GetCustomerOrdersUseCase(router).execute(SCOPE_ID, customer.id)

    assert result.is_ok()
    assert [o.id for o in result.value] == [str(o.id) for o in orders]


@pytest.mark.asyncio
async def test_get_order_use_case_other_customer(router, mock_uow):
    order = make_order(uuid4())
    mock_uow.orders.get_by_id = AsyncMock(return_value=order)

    result = await GetOrderUseCase(router).execute(SCOPE_ID, uuid4(), order.id)

    assert result.is_err()
    assert result.error.code == "ORDER_NOT_FOUND"
