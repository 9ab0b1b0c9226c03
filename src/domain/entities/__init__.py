"""
Storefront Domain Entities

Platform registry entity (Tenant) and per-tenant scope entities
(Category, Product, Customer, Order, User).
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    TenantStatus,
    TenantPlan,
    UserRole,
    OrderStatus,
)

# Export value objects
from .value_objects import CartLine, OrderLine, ShippingAddress

# Export all entities
from .tenant import Tenant
from .category import Category
from .product import Product
from .customer import Customer
from .order import Order, ALLOWED_TRANSITIONS, CANCELLABLE_STATUSES
from .user import User

__all__ = [
    # Enums
    "TenantStatus",
    "TenantPlan",
    "UserRole",
    "OrderStatus",
    # Value objects
    "CartLine",
    "OrderLine",
    "ShippingAddress",
    # Entities
    "Tenant",
    "Category",
    "Product",
    "Customer",
    "Order",
    "User",
    "ALLOWED_TRANSITIONS",
    "CANCELLABLE_STATUSES",
]
