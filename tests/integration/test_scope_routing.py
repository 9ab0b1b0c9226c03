"""
Integration tests for tenant scope routing and provisioning
Runs against real SQLite files: one platform registry, one file per scope.
"""

import asyncio
import os

import pytest
from sqlmodel import select

from src.adapter.services.scope_storage import ScopeStorage
from src.adapter.services.tenant_router import SqlAlchemyTenantDataRouter
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.tenant_router import InitialOwner
from src.domain.entities import Tenant, TenantStatus, User, UserRole
from src.domain.errors import ProvisioningFailed, ScopeUnavailable, TenantNotFound
from src.domain.scope import generate_scope_id
from tests.utils.storefront import add_product, provision_shop


class CountingStorage(ScopeStorage):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.attach_calls = 0

    async def attach(self, scope_id):
        self.attach_calls += 1
        # Yield so that concurrent callers pile up behind the scope lock
        await asyncio.sleep(0.01)
        return await super().attach(scope_id)


class BrokenAttachStorage(ScopeStorage):
    async def attach(self, scope_id):
        raise OSError("disk detached")


async def register_pending(registry_sessions, name):
    slug = name.lower()
    tenant = Tenant(
        name=name,
        slug=slug,
        scope_id=generate_scope_id(slug),
        email=f"{slug}@example.com",
    )
    async with registry_sessions() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            await uow.tenants.create(tenant)
            await uow.commit()
            return tenant.scope_id


async def registry_record(registry_sessions, scope_id):
    async with registry_sessions() as session:
        result = await session.execute(select(Tenant).where(Tenant.scope_id == scope_id))
        return result.scalar_one_or_none()


@pytest.mark.asyncio
async def test_provision_creates_scope_and_owner(registry_sessions, tenant_router, tenant_db_dir):
    """Provisioned tenant is active, resolvable and owns a seeded scope"""
    # Act
    shop = await provision_shop(registry_sessions, tenant_router, "Acme Shop")

    # Assert
    assert shop.status == "active"
    assert (tenant_db_dir / f"{shop.scope_id}.db").exists()
    assert await tenant_router.resolve("ACME-SHOP") == shop.scope_id

    handles = await tenant_router.handles_for(shop.scope_id)
    async with handles.session_factory() as session:
        result = await session.execute(select(User).where(User.role == UserRole.owner))
        owners = result.scalars().all()
    assert [owner.email for owner in owners] == ["owner@example.com"]


@pytest.mark.asyncio
async def test_resolve_rejects_inactive_tenant(registry_sessions, tenant_router):
    scope_id = await register_pending(registry_sessions, "pendingshop")

    with pytest.raises(TenantNotFound):
        await tenant_router.resolve("pendingshop")

    record = await registry_record(registry_sessions, scope_id)
    assert record.status == TenantStatus.pending


@pytest.mark.asyncio
async def test_handles_for_is_single_flight(registry_sessions, tenant_db_dir):
    """Concurrent first requests for a scope share one attach"""
    storage = CountingStorage(f"sqlite+aiosqlite:///{tenant_db_dir}/{{scope}}.db")
    router = SqlAlchemyTenantDataRouter(registry_sessions, storage)
    try:
        shop = await provision_shop(registry_sessions, router, "Acme Shop")
        # Start from an empty cache
        await router.close()
        storage.attach_calls = 0

        handles = await asyncio.gather(*[router.handles_for(shop.scope_id) for _ in range(10)])

        assert storage.attach_calls == 1
        assert all(item is handles[0] for item in handles)
    finally:
        await router.close()


@pytest.mark.asyncio
async def test_handles_for_unregistered_scope(tenant_router):
    with pytest.raises(TenantNotFound):
        await tenant_router.handles_for(generate_scope_id("ghost"))


@pytest.mark.asyncio
async def test_handles_for_missing_storage(registry_sessions, tenant_router):
    scope_id = await register_pending(registry_sessions, "nofile")

    with pytest.raises(ScopeUnavailable):
        await tenant_router.handles_for(scope_id)

    assert scope_id not in tenant_router._handles


@pytest.mark.asyncio
async def test_provision_failure_rolls_back(registry_sessions, tenant_db_dir):
    """A failed provision leaves neither storage nor registry record behind"""
    storage = BrokenAttachStorage(f"sqlite+aiosqlite:///{tenant_db_dir}/{{scope}}.db")
    router = SqlAlchemyTenantDataRouter(registry_sessions, storage)
    scope_id = await register_pending(registry_sessions, "brokenshop")
    owner = InitialOwner(email="o@example.com", name="Owner", password_hash="x" * 60)

    with pytest.raises(ProvisioningFailed):
        await router.provision(scope_id, owner)

    assert not os.path.exists(tenant_db_dir / f"{scope_id}.db")
    assert await registry_record(registry_sessions, scope_id) is None
    assert scope_id not in router._handles


@pytest.mark.asyncio
async def test_destroy_removes_storage_and_record(registry_sessions, tenant_router, tenant_db_dir):
    shop = await provision_shop(registry_sessions, tenant_router, "Acme Shop")
    await tenant_router.handles_for(shop.scope_id)

    await tenant_router.destroy(shop.scope_id)

    assert not (tenant_db_dir / f"{shop.scope_id}.db").exists()
    assert await registry_record(registry_sessions, shop.scope_id) is None
    with pytest.raises(TenantNotFound):
        await tenant_router.handles_for(shop.scope_id)
    with pytest.raises(TenantNotFound):
        await tenant_router.destroy(shop.scope_id)


@pytest.mark.asyncio
async def test_scopes_are_isolated(registry_sessions, tenant_router):
    """Two shops may use the same SKU; neither sees the other's catalog"""
    first = await provision_shop(registry_sessions, tenant_router, "First Shop")
    second = await provision_shop(registry_sessions, tenant_router, "Second Shop")
    first_handles = await tenant_router.handles_for(first.scope_id)
    second_handles = await tenant_router.handles_for(second.scope_id)

    await add_product(first_handles, sku="SHARED-1", price=10.0)
    await add_product(second_handles, sku="SHARED-1", price=99.0)

    uow = first_handles.unit_of_work()
    async with uow:
        products = await uow.products.list_all()
    assert [(p.sku, p.price) for p in products] == [("SHARED-1", 10.0)]
