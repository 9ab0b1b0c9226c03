"""
Order Fulfillment Engine

Converts a customer's embedded cart into a durable order while reserving
stock, and reverses that reservation when an order is cancelled. Each
operation runs as one atomic unit through run_atomic, so a concurrent
writer on the same product or customer row turns into a retried attempt
instead of an oversold item or a double-charged cart.
"""

import logging
import re
from typing import Any, Callable, List, Mapping, Optional, Union
from uuid import UUID

from src.app.services.transaction import (
    DEFAULT_INITIAL_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    run_atomic,
)
from src.app.services.tenant_router import TenantDataRouter
from src.app.services.unit_of_work import TenantUnitOfWork
from src.domain.entities import (
    CANCELLABLE_STATUSES,
    Order,
    OrderLine,
    OrderStatus,
    ShippingAddress,
)
from src.domain.errors import (
    CustomerNotFound,
    EmptyCart,
    FulfillmentConflict,
    InsufficientStock,
    InvalidOrderState,
    InvalidOrderStatus,
    InvalidShippingInfo,
    OrderNotFound,
    ProductUnavailable,
    TransientConflict,
)

logger = logging.getLogger(__name__)

_PHONE_RE = re.compile(r"^\+?[0-9 ()\-.]{7,20}$")
MIN_PHONE_DIGITS = 7


def validate_shipping_info(
    shipping_address: Union[ShippingAddress, Mapping[str, Any], None],
    contact_phone: Optional[str],
) -> ShippingAddress:
    """Return a normalized ShippingAddress or raise InvalidShippingInfo"""
    if not shipping_address:
        raise InvalidShippingInfo("shipping address is missing")

    if isinstance(shipping_address, ShippingAddress):
        address = shipping_address
    else:
        try:
            address = ShippingAddress(**dict(shipping_address))
        except (TypeError, ValueError) as exc:
            raise InvalidShippingInfo(f"shipping address is malformed: {exc}") from exc

    for field in ("street", "city", "zip_code"):
        if not getattr(address, field).strip():
            raise InvalidShippingInfo(f"{field} is required")

    phone = (contact_phone or "").strip()
    if not phone:
        raise InvalidShippingInfo("contact phone is missing")
    digits = sum(ch.isdigit() for ch in phone)
    if not _PHONE_RE.match(phone) or digits < MIN_PHONE_DIGITS:
        raise InvalidShippingInfo(f"contact phone {phone!r} is malformed")

    return address


class OrderFulfillmentEngine:
    """
    Transactional core of the storefront.

    State machine per create attempt:
        Started -> ItemsValidated -> StockReserved -> OrderPersisted
        -> CartCleared -> Committed, or Aborted at any step.

    Business-rule failures abort immediately. Transient conflicts abort the
    attempt and the whole attempt is retried with exponential backoff.
    """

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

    @classmethod
    async def for_scope(cls, router: TenantDataRouter, scope_id: str, **options):
        """Engine bound to the handles of one tenant scope"""
        handles = await router.handles_for(scope_id)
        return cls(handles.unit_of_work, **options)

    async def _atomic(self, operation, label: str):
        kwargs = {}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        return await run_atomic(
            self.uow_factory,
            operation,
            max_attempts=self.max_attempts,
            initial_delay=self.initial_delay,
            conflict_error=FulfillmentConflict,
            label=label,
            **kwargs,
        )

    async def create_order(
        self,
        customer_id: UUID,
        shipping_address: Union[ShippingAddress, Mapping[str, Any], None],
        contact_phone: Optional[str],
    ) -> Order:
        """
        Turn the customer's cart into a pending, unpaid order.

        Raises:
            CustomerNotFound, EmptyCart, ProductUnavailable,
            InsufficientStock, InvalidShippingInfo: never retried
            FulfillmentConflict: every attempt hit a concurrent writer
        """

        async def attempt(uow: TenantUnitOfWork) -> Order:
            # 1. Load the customer
            customer = await uow.customers.get_by_id(customer_id)
            if customer is None:
                raise CustomerNotFound(customer_id)

            # 2. Read the embedded cart
            cart_lines = customer.cart_lines
            if not cart_lines:
                raise EmptyCart()

            # 3. Validate every line and snapshot the product
            order_lines: List[OrderLine] = []
            total_amount = 0.0
            for line in cart_lines:
                product = await uow.products.get_by_id(UUID(line.product_id))
                if product is None:
                    raise ProductUnavailable(line.product_id)
                if product.stock < line.quantity:
                    raise InsufficientStock(
                        sku=product.sku,
                        name=product.name,
                        requested=line.quantity,
                        available=product.stock,
                    )

                order_line = OrderLine(
                    product_id=str(product.id),
                    name=product.name,
                    sku=product.sku,
                    price=product.price,
                    image=product.primary_image,
                    quantity=line.quantity,
                )
                order_lines.append(order_line)
                total_amount += order_line.subtotal

            # 4. Reserve stock; a zero row count means another order won the race
            for order_line in order_lines:
                reserved = await uow.products.reserve_stock(
                    UUID(order_line.product_id), order_line.quantity
                )
                if not reserved:
                    raise TransientConflict(
                        f"stock of {order_line.sku} changed during reservation"
                    )

            # 5. Validate shipping information
            address = validate_shipping_info(shipping_address, contact_phone)

            # 6. Persist the order
            order = await uow.orders.create(
                Order(
                    customer_id=customer.id,
                    items=[line.model_dump() for line in order_lines],
                    total_amount=round(total_amount, 2),
                    status=OrderStatus.pending,
                    shipping_address=address.to_dict(),
                    contact_phone=contact_phone.strip(),
                    is_paid=False,
                )
            )

            # 7. Record the order and clear the cart in one guarded write
            history = list(customer.order_history or []) + [str(order.id)]
            replaced = await uow.customers.replace_cart(customer, [], order_history=history)
            if not replaced:
                raise TransientConflict(f"customer {customer.id} changed during checkout")

            return order

        # 8. Commit (inside run_atomic)
        order = await self._atomic(attempt, label=f"create_order(customer={customer_id})")
        logger.info(
            f"Order {order.id} created for customer {customer_id} "
            f"with {len(order.items)} line(s), total {order.total_amount}"
        )
        return order

    async def cancel_order(self, order_id: UUID, customer_id: Optional[UUID] = None) -> Order:
        """
        Cancel a pending or confirmed order and put its stock back.

        Raises:
            OrderNotFound: unknown order, or not owned by customer_id
            InvalidOrderState: order is past confirmation or already closed
            FulfillmentConflict: every attempt hit a concurrent writer
        """

        async def attempt(uow: TenantUnitOfWork) -> Order:
            order = await uow.orders.get_by_id(order_id)
            if order is None or (customer_id is not None and order.customer_id != customer_id):
                raise OrderNotFound(order_id)
            return await self._cancel(uow, order)

        order = await self._atomic(attempt, label=f"cancel_order({order_id})")
        logger.info(f"Order {order_id} cancelled and {len(order.items)} line(s) restocked")
        return order

    async def _cancel(self, uow: TenantUnitOfWork, order: Order) -> Order:
        current = OrderStatus(order.status)
        if current not in CANCELLABLE_STATUSES:
            raise InvalidOrderState(order.id, current.value, "cancel")

        changed = await uow.orders.transition_status(order, current, OrderStatus.cancelled)
        if not changed:
            raise TransientConflict(f"order {order.id} changed during cancellation")

        for line in order.lines:
            restocked = await uow.products.release_stock(UUID(line.product_id), line.quantity)
            if not restocked:
                logger.warning(
                    f"Product {line.product_id} ({line.sku}) no longer exists; "
                    f"{line.quantity} unit(s) from order {order.id} not restocked"
                )
        return order

    async def update_order_status(self, order_id: UUID, new_status: str) -> Order:
        """
        Administrative status change.

        A change to cancelled runs the cancellation path so stock is restored.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise InvalidOrderStatus(new_status, [s.value for s in OrderStatus])

        async def attempt(uow: TenantUnitOfWork) -> Order:
            order = await uow.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)
            if target == OrderStatus.cancelled:
                return await self._cancel(uow, order)

            current = OrderStatus(order.status)
            if not order.can_transition_to(target):
                raise InvalidOrderState(order.id, current.value, f"move to {target.value}")

            changed = await uow.orders.transition_status(order, current, target)
            if not changed:
                raise TransientConflict(f"order {order.id} changed during status update")
            return order

        order = await self._atomic(attempt, label=f"update_order_status({order_id})")
        logger.info(f"Order {order_id} moved to {target.value}")
        return order

    async def get_order(self, customer_id: UUID, order_id: UUID) -> Order:
        uow = self.uow_factory()
        async with uow:
            order = await uow.orders.get_by_id(order_id)
            if order is None or order.customer_id != customer_id:
                raise OrderNotFound(order_id)
            return order

    async def list_customer_orders(self, customer_id: UUID) -> List[Order]:
        uow = self.uow_factory()
        async with uow:
            customer = await uow.customers.get_by_id(customer_id)
            if customer is None:
                raise CustomerNotFound(customer_id)
            return await uow.orders.list_by_customer(customer_id)

