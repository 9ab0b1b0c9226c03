"""
Storefront Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class TenantStatus(str, Enum):
    """Tenant lifecycle status"""

    pending = "pending"
    active = "active"
    suspended = "suspended"
    inactive = "inactive"


class TenantPlan(str, Enum):
    """Tenant subscription plan"""

    free = "free"
    basic = "basic"
    premium = "premium"
    enterprise = "enterprise"


class UserRole(str, Enum):
    """Staff role within a tenant's shop"""

    owner = "owner"
    admin = "admin"
    manager = "manager"
    employee = "employee"


class OrderStatus(str, Enum):
    """Order status"""

    pending = "pending"
    confirmed = "confirmed"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"
    returned = "returned"
