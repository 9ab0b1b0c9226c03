"""Helpers that seed tenants, products and customers for integration tests"""

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.catalog_service import CatalogService, ProductInput
from src.app.services.customer_service import CustomerService
from src.app.use_cases.tenants import ProvisionTenantCommand, ProvisionTenantUseCase

ADMIN_HEADERS = {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}
ADDRESS = {"street": "1 Main St", "city": "Springfield", "zip_code": "12345"}
PHONE = "+1 555 123 4567"

# Minimum bcrypt cost keeps fixtures fast
TEST_BCRYPT_ROUNDS = 4


async def provision_shop(registry_sessions, router, name="Acme Shop"):
    """Provision a tenant through the use case; returns its TenantResponse"""
    command = ProvisionTenantCommand(
        name=name,
        email="shop@example.com",
        owner_name="Owner",
        owner_email="owner@example.com",
        owner_password="OwnerPass123!",
    )
    async with registry_sessions() as session:
        result = await ProvisionTenantUseCase(SqlAlchemyUnitOfWork(session), router).execute(
            command
        )
    assert result.is_ok(), result.error
    return result.value


async def add_product(handles, sku="SKU-1", price=10.0, stock=5, name=None, images=None):
    service = CatalogService(handles.unit_of_work)
    return await service.create_product(
        ProductInput(sku=sku, name=name or sku, price=price, stock=stock, images=images or [])
    )


async def add_customer(handles, email="shopper@example.com"):
    service = CustomerService(handles.unit_of_work, rounds=TEST_BCRYPT_ROUNDS)
    return await service.register(email=email, password="ShopperPass1!")
