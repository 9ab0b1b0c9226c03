"""
Cart Service

The cart is embedded in the customer row and always rewritten whole.
Every mutation is a read-modify-write guarded by the customer version and
retried through run_atomic when another writer got there first.
"""

import logging
from typing import Awaitable, Callable, List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.app.services.transaction import (
    DEFAULT_INITIAL_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    run_atomic,
)
from src.app.services.unit_of_work import TenantUnitOfWork
from src.domain.entities import CartLine, Product
from src.domain.errors import (
    CartConflict,
    CustomerNotFound,
    InsufficientStock,
    InvalidQuantity,
    ProductNotFound,
    TransientConflict,
)

logger = logging.getLogger(__name__)

CartChange = Callable[[TenantUnitOfWork, List[CartLine]], Awaitable[List[CartLine]]]


class CartProductView(BaseModel):
    """Live product data shown next to a cart line"""

    id: str
    sku: str
    name: str
    price: float
    image: str
    stock: int


class CartItemView(BaseModel):
    product_id: str
    quantity: int
    product: Optional[CartProductView] = None
    subtotal: float = 0


def _product_view(product: Product) -> CartProductView:
    return CartProductView(
        id=str(product.id),
        sku=product.sku,
        name=product.name,
        price=product.price,
        image=product.primary_image,
        stock=product.stock,
    )


async def _load_product(uow: TenantUnitOfWork, product_id: UUID) -> Product:
    product = await uow.products.get_by_id(product_id)
    if product is None:
        raise ProductNotFound(product_id)
    return product


def _check_stock(product: Product, quantity: int):
    if quantity > product.stock:
        raise InsufficientStock(
            sku=product.sku,
            name=product.name,
            requested=quantity,
            available=product.stock,
        )


class CartService:
    def __init__(
        self,
        uow_factory: Callable[[], TenantUnitOfWork],
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        sleep=None,
    ):
        self.uow_factory = uow_factory
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self._sleep = sleep

    async def _mutate(self, customer_id: UUID, change: CartChange, label: str) -> List[CartItemView]:
        async def attempt(uow: TenantUnitOfWork) -> List[CartItemView]:
            customer = await uow.customers.get_by_id(customer_id)
            if customer is None:
                raise CustomerNotFound(customer_id)

            lines = await change(uow, customer.cart_lines)
            replaced = await uow.customers.replace_cart(
                customer, [line.model_dump() for line in lines]
            )
            if not replaced:
                raise TransientConflict(f"cart of customer {customer_id} changed concurrently")
            return await self._views(uow, lines)

        kwargs = {}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        return await run_atomic(
            self.uow_factory,
            attempt,
            max_attempts=self.max_attempts,
            initial_delay=self.initial_delay,
            conflict_error=CartConflict,
            label=f"{label}(customer={customer_id})",
            **kwargs,
        )

    async def _views(self, uow: TenantUnitOfWork, lines: List[CartLine]) -> List[CartItemView]:
        products = await uow.products.get_by_ids([UUID(line.product_id) for line in lines])
        by_id = {str(product.id): product for product in products}

        views = []
        for line in lines:
            product = by_id.get(line.product_id)
            views.append(
                CartItemView(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    product=_product_view(product) if product else None,
                    subtotal=round(product.price * line.quantity, 2) if product else 0,
                )
            )
        return views

    async def view(self, customer_id: UUID) -> List[CartItemView]:
        """Cart lines joined with live product data; removed products show as None"""
        uow = self.uow_factory()
        async with uow:
            customer = await uow.customers.get_by_id(customer_id)
            if customer is None:
                raise CustomerNotFound(customer_id)
            return await self._views(uow, customer.cart_lines)

    async def add_item(
        self, customer_id: UUID, product_id: UUID, quantity: int = 1
    ) -> List[CartItemView]:
        """Add quantity of a product, merging with an existing line"""
        if quantity < 1:
            raise InvalidQuantity(quantity)

        async def change(uow: TenantUnitOfWork, lines: List[CartLine]) -> List[CartLine]:
            product = await _load_product(uow, product_id)
            key = str(product.id)

            current = next((line.quantity for line in lines if line.product_id == key), 0)
            wanted = current + quantity
            _check_stock(product, wanted)

            if current:
                return [
                    CartLine(product_id=key, quantity=wanted) if line.product_id == key else line
                    for line in lines
                ]
            return lines + [CartLine(product_id=key, quantity=wanted)]

        views = await self._mutate(customer_id, change, "add_cart_item")
        logger.info(f"Added {quantity} x {product_id} to cart of customer {customer_id}")
        return views

    async def update_quantity(
        self, customer_id: UUID, product_id: UUID, quantity: int
    ) -> List[CartItemView]:
        """Set the quantity of a line; zero or less removes it"""
        if quantity <= 0:
            return await self.remove_item(customer_id, product_id)

        async def change(uow: TenantUnitOfWork, lines: List[CartLine]) -> List[CartLine]:
            product = await _load_product(uow, product_id)
            _check_stock(product, quantity)
            key = str(product.id)

            if any(line.product_id == key for line in lines):
                return [
                    CartLine(product_id=key, quantity=quantity) if line.product_id == key else line
                    for line in lines
                ]
            return lines + [CartLine(product_id=key, quantity=quantity)]

        return await self._mutate(customer_id, change, "update_cart_item")

    async def remove_item(self, customer_id: UUID, product_id: UUID) -> List[CartItemView]:
        key = str(product_id)

        async def change(uow: TenantUnitOfWork, lines: List[CartLine]) -> List[CartLine]:
            return [line for line in lines if line.product_id != key]

        return await self._mutate(customer_id, change, "remove_cart_item")

    async def clear(self, customer_id: UUID) -> List[CartItemView]:
        async def change(uow: TenantUnitOfWork, lines: List[CartLine]) -> List[CartLine]:
            return []

        return await self._mutate(customer_id, change, "clear_cart")
