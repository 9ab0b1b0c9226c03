"""
Use Case: Cancel Order (cancelOrder(scopeId, orderId))

Cancels a pending or confirmed order and returns its stock.
"""

from typing import Optional
from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.fulfillment_engine import OrderFulfillmentEngine
from src.app.services.tenant_router import TenantDataRouter
from src.app.services.transaction import DEFAULT_INITIAL_DELAY, DEFAULT_MAX_ATTEMPTS
from src.domain.errors import StorefrontError
from .dtos import OrderResponse


class CancelOrderUseCase:
    def __init__(
        self,
        router: TenantDataRouter,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
    ):
        self.router = router
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay

    async def execute(
        self, scope_id: str, order_id: UUID, customer_id: Optional[UUID] = None
    ) -> Result[OrderResponse]:
        """
        Args:
            scope_id: tenant scope token
            order_id: order to cancel
            customer_id: when given, the order must belong to this customer
        """
        try:
            engine = await OrderFulfillmentEngine.for_scope(
                self.router,
                scope_id,
                max_attempts=self.max_attempts,
                initial_delay=self.initial_delay,
            )
            order = await engine.cancel_order(order_id, customer_id=customer_id)
        except StorefrontError as exc:
            return Return.err(exc.to_error())

        return Return.ok(OrderResponse.from_entity(order))
