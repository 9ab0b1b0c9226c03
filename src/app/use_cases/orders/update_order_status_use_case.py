from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.fulfillment_engine import OrderFulfillmentEngine
from src.app.services.tenant_router import TenantDataRouter
from src.app.services.transaction import DEFAULT_INITIAL_DELAY, DEFAULT_MAX_ATTEMPTS
from src.domain.errors import StorefrontError
from .dtos import OrderResponse, UpdateOrderStatusCommand


class UpdateOrderStatusUseCase:
    """Administrative order status change; cancelling restocks the order"""

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
        self, scope_id: str, order_id: UUID, command: UpdateOrderStatusCommand
    ) -> Result[OrderResponse]:
        try:
            engine = await OrderFulfillmentEngine.for_scope(
                self.router,
                scope_id,
                max_attempts=self.max_attempts,
                initial_delay=self.initial_delay,
            )
            order = await engine.update_order_status(order_id, command.status)
        except StorefrontError as exc:
            return Return.err(exc.to_error())

        return Return.ok(OrderResponse.from_entity(order))
