from fastapi import status
from src.libs.result import Error

# Error code -> HTTP status. Unknown codes are server errors.
ERROR_STATUS = {
    # Resolution
    "INVALID_TENANT_IDENTIFIER": status.HTTP_400_BAD_REQUEST,
    "TENANT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    # Business rules
    "CUSTOMER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "EMPTY_CART": status.HTTP_400_BAD_REQUEST,
    "PRODUCT_UNAVAILABLE": status.HTTP_409_CONFLICT,
    "INSUFFICIENT_STOCK": status.HTTP_409_CONFLICT,
    "INVALID_SHIPPING_INFO": status.HTTP_400_BAD_REQUEST,
    "ORDER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_ORDER_STATE": status.HTTP_409_CONFLICT,
    "INVALID_ORDER_STATUS": status.HTTP_400_BAD_REQUEST,
    "PRODUCT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CATEGORY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "DUPLICATE_FIELD": status.HTTP_409_CONFLICT,
    "INVALID_QUANTITY": status.HTTP_400_BAD_REQUEST,
    "TENANT_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "INVALID_TENANT_STATUS": status.HTTP_400_BAD_REQUEST,
    # Retry budget exhausted
    "FULFILLMENT_CONFLICT": status.HTTP_409_CONFLICT,
    "CART_CONFLICT": status.HTTP_409_CONFLICT,
    # Infrastructure
    "SCOPE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "PROVISIONING_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(
        self, base_error: Error, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    ):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


def raise_for_error(error: Error):
    """Raise the ClientError or ServerError matching an error code"""
    status_code = ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        raise ServerError(error, status_code=status_code)
    raise ClientError(error, status_code=status_code)
