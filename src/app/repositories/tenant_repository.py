from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Tenant


class ITenantRepository(ABC):
    """Tenant registry repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID"""
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[Tenant]:
        """Get tenant by its public slug"""
        pass

    @abstractmethod
    async def get_by_scope_id(self, scope_id: str) -> Optional[Tenant]:
        """Get tenant by its isolated scope identifier"""
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Tenant]:
        """Get tenant by display name"""
        pass

    @abstractmethod
    async def list_all(self) -> List[Tenant]:
        """List all tenants, oldest first"""
        pass

    @abstractmethod
    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant"""
        pass

    @abstractmethod
    async def update(self, tenant: Tenant) -> Tenant:
        """Update existing tenant"""
        pass

    @abstractmethod
    async def delete(self, tenant: Tenant) -> None:
        """Delete tenant record"""
        pass
