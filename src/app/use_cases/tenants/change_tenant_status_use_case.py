"""
Use Case: Change Tenant Status

Administrative status change. Only active tenants are routable, so a
suspended or inactive tenant stops resolving on the next request.
"""

from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import TenantStatus
from src.domain.errors import InvalidTenantStatus, TenantNotFound
from .dtos import TenantResponse


class ChangeTenantStatusUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID, status: str) -> Result[TenantResponse]:
        try:
            new_status = TenantStatus(status)
        except ValueError:
            return Return.err(
                InvalidTenantStatus(status, [s.value for s in TenantStatus]).to_error()
            )

        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if not tenant:
                return Return.err(TenantNotFound(str(tenant_id)).to_error())

            tenant.status = new_status
            tenant.updated_at = utcnow()
            tenant = await self.uow.tenants.update(tenant)
            await self.uow.commit()

            return Return.ok(TenantResponse.from_entity(tenant))
