"""
Unit tests for CartService
"""

import pytest
from unittest.mock import AsyncMock
from uuid import uuid4

from src.app.services.cart_service import CartService
from src.domain.entities import Customer, Product
from src.domain.errors import (
    CartConflict,
    CustomerNotFound,
    InsufficientStock,
    InvalidQuantity,
    ProductNotFound,
)


@pytest.fixture
def service(uow_factory, no_sleep):
    return CartService(uow_factory, sleep=no_sleep)


@pytest.fixture
def product():
    return Product(id=uuid4(), sku="TEE-1", name="T-Shirt", price=12.5, stock=4)


def setup_cart(mock_uow, customer, products):
    by_id = {p.id: p for p in products}
    mock_uow.customers.get_by_id = AsyncMock(return_value=customer)
    mock_uow.products.get_by_id = AsyncMock(side_effect=lambda pid: by_id.get(pid))
    mock_uow.products.get_by_ids = AsyncMock(
        side_effect=lambda ids: [by_id[i] for i in ids if i in by_id]
    )
    mock_uow.customers.replace_cart = AsyncMock(return_value=True)


def written_cart(mock_uow):
    return mock_uow.customers.replace_cart.await_args.args[1]


@pytest.mark.asyncio
async def test_add_item_merges_with_existing_line(service, mock_uow, product):
    customer = Customer(
        id=uuid4(),
        email="c@example.com",
        password_hash="x" * 60,
        cart=[{"product_id": str(product.id), "quantity": 1}],
    )
    setup_cart(mock_uow, customer, [product])

    views = await service.add_item(customer.id, product.id, 2)

    assert written_cart(mock_uow) == [{"product_id": str(product.id), "quantity": 3}]
    assert views[0].quantity == 3
    assert views[0].product.sku == "TEE-1"
    assert views[0].subtotal == 37.5
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_add_item_beyond_stock(service, mock_uow, product):
    customer = Customer(
        id=uuid4(),
        email="c@example.com",
        password_hash="x" * 60,
        cart=[{"product_id": str(product.id), "quantity": 3}],
    )
    setup_cart(mock_uow, customer, [product])

    with pytest.raises(InsufficientStock):
        await service.add_item(customer.id, product.id, 2)

    mock_uow.customers.replace_cart.assert_not_awaited()


@pytest.mark.asyncio
async def test_add_item_validation(service, mock_uow, product):
    customer = Customer(id=uuid4(), email="c@example.com", password_hash="x" * 60)
    setup_cart(mock_uow, customer, [])

    with pytest.raises(InvalidQuantity):
        await service.add_item(customer.id, product.id, 0)
    with pytest.raises(ProductNotFound):
        await service.add_item(customer.id, product.id, 1)

    mock_uow.customers.get_by_id = AsyncMock(return_value=None)
    with pytest.raises(CustomerNotFound):
        await service.add_item(customer.id, product.id, 1)


@pytest.mark.asyncio
async def test_update_quantity_sets_and_removes(service, mock_uow, product):
    other = uuid4()
    customer = Customer(
        id=uuid4(),
        email="c@example.com",
        password_hash="x" * 60,
        cart=[
            {"product_id": str(product.id), "quantity": 1},
            {"product_id": str(other), "quantity": 2},
        ],
    )
    setup_cart(mock_uow, customer, [product])

    await service.update_quantity(customer.id, product.id, 4)
    assert written_cart(mock_uow)[0] == {"product_id": str(product.id), "quantity": 4}

    views = await service.update_quantity(customer.id, product.id, 0)
    assert written_cart(mock_uow) == [{"product_id": str(other), "quantity": 2}]
    # Product no longer in the catalog
    assert views[0].product is None
    assert views[0].subtotal == 0


@pytest.mark.asyncio
async def test_clear_cart(service, mock_uow, product):
    customer = Customer(
        id=uuid4(),
        email="c@example.com",
        password_hash="x" * 60,
        cart=[{"product_id": str(product.id), "quantity": 1}],
    )
    setup_cart(mock_uow, customer, [product])

    views = await service.clear(customer.id)

    assert views == []
    assert written_cart(mock_uow) == []


@pytest.mark.asyncio
async def test_concurrent_writer_exhausts_retries(service, mock_uow, product):
    customer = Customer(id=uuid4(), email="c@example.com", password_hash="x" * 60)
    setup_cart(mock_uow, customer, [product])
    mock_uow.customers.replace_cart = AsyncMock(return_value=False)

    with pytest.raises(CartConflict) as exc_info:
        await service.add_item(customer.id, product.id, 1)

    assert exc_info.value.attempts == 5
    assert mock_uow.customers.replace_cart.await_count == 5
    mock_uow.commit.assert_not_awaited()
