from typing import List
from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.fulfillment_engine import OrderFulfillmentEngine
from src.app.services.tenant_router import TenantDataRouter
from src.domain.errors import StorefrontError
from .dtos import OrderResponse


class GetCustomerOrdersUseCase:
    """A customer's orders, newest first"""

    def __init__(self, router: TenantDataRouter):
        self.router = router

    async def execute(self, scope_id: str, customer_id: UUID) -> Result[List[OrderResponse]]:
        try:
            engine = await OrderFulfillmentEngine.for_scope(self.router, scope_id)
            orders = await engine.list_customer_orders(customer_id)
        except StorefrontError as exc:
            return Return.err(exc.to_error())

        return Return.ok([OrderResponse.from_entity(order) for order in orders])


class GetOrderUseCase:
    def __init__(self, router: TenantDataRouter):
        self.router = router

    async def execute(
        self, scope_id: str, customer_id: UUID, order_id: UUID
    ) -> Result[OrderResponse]:
        try:
            engine = await OrderFulfillmentEngine.for_scope(self.router, scope_id)
            order = await engine.get_order(customer_id, order_id)
        except StorefrontError as exc:
            return Return.err(exc.to_error())

        return Return.ok(OrderResponse.from_entity(order))
