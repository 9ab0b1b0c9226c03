from typing import List
from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import TenantNotFound
from .dtos import TenantResponse


class ListTenantsUseCase:
    """List every registered tenant, oldest first"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[List[TenantResponse]]:
        async with self.uow:
            tenants = await self.uow.tenants.list_all()
            return Return.ok([TenantResponse.from_entity(tenant) for tenant in tenants])


class GetTenantUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID) -> Result[TenantResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if not tenant:
                return Return.err(TenantNotFound(str(tenant_id)).to_error())
            return Return.ok(TenantResponse.from_entity(tenant))
