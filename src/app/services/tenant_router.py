from abc import ABC, abstractmethod

from pydantic import BaseModel

from src.app.services.unit_of_work import TenantUnitOfWork


class InitialOwner(BaseModel):
    """First staff user seeded into a freshly provisioned scope"""

    email: str
    name: str
    password_hash: str


class ITenantHandles(ABC):
    """Handle set bound to one tenant scope"""

    scope_id: str

    @abstractmethod
    def unit_of_work(self) -> TenantUnitOfWork:
        """New, not yet entered, unit of work on this scope"""
        pass


class TenantDataRouter(ABC):
    """Abstract Tenant Data Router - maps tenants to isolated data scopes"""

    @abstractmethod
    async def resolve(self, tenant_public_id: str) -> str:
        """Validate a public tenant identifier and return its scope_id"""
        pass

    @abstractmethod
    async def handles_for(self, scope_id: str) -> ITenantHandles:
        """Return the cached handle set of a scope, building it once"""
        pass

    @abstractmethod
    async def provision(self, scope_id: str, initial_owner: InitialOwner) -> ITenantHandles:
        """Create the physical scope and seed its owner"""
        pass

    @abstractmethod
    async def destroy(self, scope_id: str) -> None:
        """Drop the physical scope, then its registry record"""
        pass

    @abstractmethod
    async def close(self) -> None:
        pass
