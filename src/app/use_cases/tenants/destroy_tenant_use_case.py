"""
Use Case: Destroy Tenant

Drops a tenant's data scope and then its registry record.
"""

from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.tenant_router import TenantDataRouter
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import StorefrontError, TenantNotFound
from .dtos import DestroyTenantResponse


class DestroyTenantUseCase:
    def __init__(self, uow: UnitOfWork, router: TenantDataRouter):
        self.uow = uow
        self.router = router

    async def execute(self, tenant_id: UUID) -> Result[DestroyTenantResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if not tenant:
                return Return.err(TenantNotFound(str(tenant_id)).to_error())
            scope_id = tenant.scope_id

        try:
            await self.router.destroy(scope_id)
        except StorefrontError as exc:
            return Return.err(exc.to_error())

        return Return.ok(
            DestroyTenantResponse(status="destroyed", tenant_id=str(tenant_id), scope_id=scope_id)
        )
