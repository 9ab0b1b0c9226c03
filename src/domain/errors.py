"""
Storefront Domain Errors

Typed errors raised by the tenant router, the fulfillment engine and the
scope services. Every error carries a stable code and a message that can be
shown to the end user; use cases convert them to libs Result errors.
"""

from typing import Optional

from src.libs.result import Error


class StorefrontError(Exception):
    """Base class for all typed storefront errors"""

    code = "STOREFRONT_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        self.message = message
        self.reason = reason
        super().__init__(message)

    def to_error(self) -> Error:
        return Error(self.code, self.message, reason=self.reason)


class TransientConflict(Exception):
    """
    A concurrent writer changed a row this attempt depends on.

    Never surfaced to callers: the transaction helper retries the attempt
    and raises a ConflictError once the retry budget is spent.
    """


# Resolution errors


class ResolutionError(StorefrontError):
    pass


class InvalidTenantIdentifier(ResolutionError):
    code = "INVALID_TENANT_IDENTIFIER"

    def __init__(self, identifier: Optional[str]):
        self.identifier = identifier
        super().__init__(f"Invalid tenant identifier: {identifier!r}")


class TenantNotFound(ResolutionError):
    code = "TENANT_NOT_FOUND"

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Tenant not found: {identifier}")


# Business-rule errors


class BusinessRuleError(StorefrontError):
    pass


class CustomerNotFound(BusinessRuleError):
    code = "CUSTOMER_NOT_FOUND"

    def __init__(self, customer_id):
        self.customer_id = customer_id
        super().__init__(f"Customer {customer_id} not found")


class EmptyCart(BusinessRuleError):
    code = "EMPTY_CART"

    def __init__(self):
        super().__init__("Your cart is empty. Add items before placing an order")


class ProductUnavailable(BusinessRuleError):
    code = "PRODUCT_UNAVAILABLE"

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(
            f"Product with ID {product_id} is no longer available",
        )


class InsufficientStock(BusinessRuleError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, sku: str, name: str, requested: int, available: int):
        self.sku = sku
        self.name = name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough stock for {name}. Only {available} available",
            reason=f"sku={sku} requested={requested} available={available}",
        )


class InvalidShippingInfo(BusinessRuleError):
    code = "INVALID_SHIPPING_INFO"

    def __init__(self, detail: str):
        super().__init__(
            "Shipping address and contact phone are required",
            reason=detail,
        )


class OrderNotFound(BusinessRuleError):
    code = "ORDER_NOT_FOUND"

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class InvalidOrderState(BusinessRuleError):
    code = "INVALID_ORDER_STATE"

    def __init__(self, order_id, status: str, action: str):
        self.order_id = order_id
        self.status = status
        super().__init__(f"Cannot {action} order {order_id} while it is {status}")


class InvalidOrderStatus(BusinessRuleError):
    code = "INVALID_ORDER_STATUS"

    def __init__(self, status: str, allowed):
        super().__init__(
            f"Invalid order status: {status}. Allowed statuses are: {', '.join(allowed)}"
        )


class ProductNotFound(BusinessRuleError):
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"Product {identifier} not found in this shop")


class CategoryNotFound(BusinessRuleError):
    code = "CATEGORY_NOT_FOUND"

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"Category {identifier} not found in this shop")


class DuplicateField(BusinessRuleError):
    code = "DUPLICATE_FIELD"

    def __init__(self, field: str, value=None):
        self.field = field
        super().__init__(f"Duplicate {field} already exists", reason=str(value) if value else None)


class InvalidQuantity(BusinessRuleError):
    code = "INVALID_QUANTITY"

    def __init__(self, quantity):
        super().__init__(f"Quantity must be at least 1, got {quantity}")


class TenantAlreadyExists(BusinessRuleError):
    code = "TENANT_ALREADY_EXISTS"

    def __init__(self, name: str):
        super().__init__(f"A tenant named '{name}' already exists")


class InvalidTenantStatus(BusinessRuleError):
    code = "INVALID_TENANT_STATUS"

    def __init__(self, status: str, allowed):
        super().__init__(
            f"Invalid tenant status: {status}. Allowed statuses are: {', '.join(allowed)}"
        )


# Retry budget exhausted


class ConflictError(StorefrontError):
    def __init__(self, attempts: int, message: str):
        self.attempts = attempts
        super().__init__(message)


class FulfillmentConflict(ConflictError):
    code = "FULFILLMENT_CONFLICT"

    def __init__(self, attempts: int):
        super().__init__(
            attempts,
            "Order could not be completed due to concurrent modifications. Please try again later",
        )


class CartConflict(ConflictError):
    code = "CART_CONFLICT"

    def __init__(self, attempts: int):
        super().__init__(
            attempts,
            "Cart was modified concurrently. Please try again",
        )


# Infrastructure


class ScopeUnavailable(StorefrontError):
    code = "SCOPE_UNAVAILABLE"

    def __init__(self, scope_id: str, detail: str = ""):
        self.scope_id = scope_id
        super().__init__(f"Data scope {scope_id} is unavailable", reason=detail or None)


class ProvisioningFailed(StorefrontError):
    code = "PROVISIONING_FAILED"

    def __init__(self, scope_id: str, detail: str):
        self.scope_id = scope_id
        super().__init__(f"Failed to provision data scope {scope_id}", reason=detail)
