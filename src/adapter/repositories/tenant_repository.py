from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.tenant_repository import ITenantRepository
from src.domain.entities import Tenant
from src.domain.errors import TenantAlreadyExists


class TenantRepository(ITenantRepository):
    """Tenant registry repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID"""
        stmt = select(Tenant).where(Tenant.id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Tenant]:
        """Get tenant by its public slug"""
        stmt = select(Tenant).where(Tenant.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_scope_id(self, scope_id: str) -> Optional[Tenant]:
        """Get tenant by its isolated scope identifier"""
        stmt = select(Tenant).where(Tenant.scope_id == scope_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Tenant]:
        """Get tenant by display name"""
        stmt = select(Tenant).where(Tenant.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self) -> List[Tenant]:
        """List all tenants, oldest first"""
        stmt = select(Tenant).order_by(Tenant.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _flush(self, tenant: Tenant) -> Tenant:
        # name, slug and scope_id are unique; a lost race surfaces here
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise TenantAlreadyExists(tenant.name) from exc
        await self.session.refresh(tenant)
        return tenant

    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant"""
        self.session.add(tenant)
        return await self._flush(tenant)

    async def update(self, tenant: Tenant) -> Tenant:
        """Update existing tenant"""
        self.session.add(tenant)
        return await self._flush(tenant)

    async def delete(self, tenant: Tenant) -> None:
        """Delete tenant record"""
        await self.session.delete(tenant)
        await self.session.flush()
