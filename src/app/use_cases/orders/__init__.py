"""
Order Use Cases

Entry points of the order fulfillment engine, bound to a tenant scope.
"""

from .cancel_order_use_case import CancelOrderUseCase
from .create_order_use_case import CreateOrderUseCase
from .dtos import CreateOrderCommand, OrderResponse, UpdateOrderStatusCommand
from .get_orders_use_case import GetCustomerOrdersUseCase, GetOrderUseCase
from .update_order_status_use_case import UpdateOrderStatusUseCase

__all__ = [
    "CreateOrderUseCase",
    "CancelOrderUseCase",
    "UpdateOrderStatusUseCase",
    "GetCustomerOrdersUseCase",
    "GetOrderUseCase",
    "CreateOrderCommand",
    "UpdateOrderStatusCommand",
    "OrderResponse",
]
