"""
Use Case: Create Order (createOrder(scopeId, customerId, shippingAddress, contactPhone))

Checks out a customer's cart inside one tenant scope.
"""

from src.libs.result import Result, Return
from src.app.services.fulfillment_engine import OrderFulfillmentEngine
from src.app.services.tenant_router import TenantDataRouter
from src.app.services.transaction import DEFAULT_INITIAL_DELAY, DEFAULT_MAX_ATTEMPTS
from src.domain.errors import StorefrontError
from .dtos import CreateOrderCommand, OrderResponse


class CreateOrderUseCase:
    """
    Business Logic:
    1. Bind the fulfillment engine to the tenant scope
    2. Convert the cart to an order atomically (stock reserved, cart cleared)
    3. Return the order snapshot

    Typed storefront errors become Result errors; anything else propagates.
    """

    def __init__(
        self,
        router: TenantDataRouter,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
    ):
        self.router = router
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay

    async def execute(self, scope_id: str, command: CreateOrderCommand) -> Result[OrderResponse]:
        try:
            engine = await OrderFulfillmentEngine.for_scope(
                self.router,
                scope_id,
                max_attempts=self.max_attempts,
                initial_delay=self.initial_delay,
            )
            order = await engine.create_order(
                command.customer_id, command.shipping_address, command.contact_phone
            )
        except StorefrontError as exc:
            return Return.err(exc.to_error())

        return Return.ok(OrderResponse.from_entity(order))
