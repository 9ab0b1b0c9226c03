"""
Use Case: Provision Tenant

Registers a new shop in the platform registry and creates its isolated
data scope with the first owner account.
"""

import logging

from src.libs.result import Result, Return
from src.app.services.customer_service import hash_password
from src.app.services.tenant_router import InitialOwner, TenantDataRouter
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Tenant, TenantStatus
from src.domain.errors import InvalidTenantIdentifier, ProvisioningFailed, TenantAlreadyExists
from src.domain.scope import (
    DEFAULT_SCOPE_PREFIX,
    generate_scope_id,
    normalize_tenant_identifier,
    slugify,
)
from .dtos import ProvisionTenantCommand, TenantResponse

logger = logging.getLogger(__name__)


class ProvisionTenantUseCase:
    """
    Provision a tenant (provisionTenant(tenantData, initialOwnerCredentials)).

    Business Logic:
    1. Derive the slug from the name and validate it
    2. Reject a duplicate name or slug
    3. Create the registry record with status=pending and a new scope_id
    4. Hash the owner password with bcrypt
    5. Create the scope storage and seed the owner (router compensates on failure)
    6. Mark the tenant active
    """

    def __init__(
        self,
        uow: UnitOfWork,
        router: TenantDataRouter,
        scope_prefix: str = DEFAULT_SCOPE_PREFIX,
    ):
        self.uow = uow
        self.router = router
        self.scope_prefix = scope_prefix

    async def execute(self, command: ProvisionTenantCommand) -> Result[TenantResponse]:
        # 1. Derive slug
        try:
            slug = normalize_tenant_identifier(slugify(command.name))
        except InvalidTenantIdentifier as exc:
            return Return.err(exc.to_error())

        async with self.uow:
            # 2. Duplicates
            if await self.uow.tenants.get_by_name(command.name) or await self.uow.tenants.get_by_slug(
                slug
            ):
                return Return.err(TenantAlreadyExists(command.name).to_error())

            # 3. Registry record; a concurrent request may win the unique index
            try:
                tenant = await self.uow.tenants.create(
                    Tenant(
                        name=command.name,
                        slug=slug,
                        scope_id=generate_scope_id(slug, self.scope_prefix),
                        email=command.email,
                        plan=command.plan,
                        settings=command.settings,
                        status=TenantStatus.pending,
                    )
                )
            except TenantAlreadyExists as exc:
                return Return.err(exc.to_error())
            await self.uow.commit()
            tenant_id, scope_id = tenant.id, tenant.scope_id

        # 4. Owner credentials
        owner = InitialOwner(
            email=command.owner_email.lower(),
            name=command.owner_name,
            password_hash=hash_password(command.owner_password),
        )

        # 5. Physical scope
        try:
            await self.router.provision(scope_id, owner)
        except ProvisioningFailed as exc:
            logger.error(f"Tenant {command.name} could not be provisioned: {exc.reason}")
            return Return.err(exc.to_error())

        # 6. Activate
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            tenant.status = TenantStatus.active
            tenant.updated_at = utcnow()
            tenant = await self.uow.tenants.update(tenant)
            await self.uow.commit()

            logger.info(f"Tenant {slug} provisioned on scope {scope_id}")
            return Return.ok(TenantResponse.from_entity(tenant))
