"""
Use Case: Update Tenant

Administrative change of a tenant's registry metadata.
"""

import logging
from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.errors import TenantAlreadyExists, TenantNotFound
from .dtos import TenantResponse, UpdateTenantCommand

logger = logging.getLogger(__name__)


class UpdateTenantUseCase:
    """
    Business Logic:
    1. Load the tenant
    2. Reject a name already used by another tenant
    3. Apply name, email, plan and settings (settings are replaced whole)

    The public slug and the scope_id never change, so routing and the
    physical data scope are unaffected by a rename.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID, command: UpdateTenantCommand) -> Result[TenantResponse]:
        values = {
            field: value
            for field, value in command.model_dump(exclude_unset=True).items()
            if value is not None
        }

        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if not tenant:
                return Return.err(TenantNotFound(str(tenant_id)).to_error())

            new_name = values.get("name")
            if new_name and new_name != tenant.name:
                other = await self.uow.tenants.get_by_name(new_name)
                if other is not None and other.id != tenant.id:
                    return Return.err(TenantAlreadyExists(new_name).to_error())

            for field, value in values.items():
                setattr(tenant, field, value)
            tenant.updated_at = utcnow()

            try:
                tenant = await self.uow.tenants.update(tenant)
            except TenantAlreadyExists as exc:
                return Return.err(exc.to_error())
            await self.uow.commit()

            logger.info(f"Tenant {tenant.slug} updated: {sorted(values)}")
            return Return.ok(TenantResponse.from_entity(tenant))
