"""
Tenant Data Router

Resolves a tenant's public identifier to its scope token and hands out
per-scope handles (engine, session factory, unit of work). Handles are
built at most once per scope per router instance: concurrent first
requests for the same scope wait on one per-scope lock and share the
result.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.scope_storage import ScopeStorage
from src.adapter.services.unit_of_work import (
    SqlAlchemyTenantUnitOfWork,
    SqlAlchemyUnitOfWork,
)
from src.app.services.tenant_router import InitialOwner, ITenantHandles, TenantDataRouter
from src.domain.entities import TenantStatus, User, UserRole
from src.domain.errors import (
    ProvisioningFailed,
    ScopeUnavailable,
    StorefrontError,
    TenantNotFound,
)
from src.domain.scope import (
    DEFAULT_SCOPE_PREFIX,
    normalize_tenant_identifier,
    validate_scope_id,
)

logger = logging.getLogger(__name__)


class TenantHandles(ITenantHandles):
    def __init__(self, scope_id: str, engine: AsyncEngine):
        self.scope_id = scope_id
        self.engine = engine
        self.session_factory = sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    def unit_of_work(self) -> SqlAlchemyTenantUnitOfWork:
        return SqlAlchemyTenantUnitOfWork(self.session_factory)

    async def dispose(self):
        await self.engine.dispose()


class SqlAlchemyTenantDataRouter(TenantDataRouter):
    """
    Router over a platform registry database and one database per scope.

    Args:
        registry_sessions: session factory of the platform database
        storage: creates, attaches and drops scope databases
        scope_prefix: prefix every scope token carries
    """

    def __init__(
        self,
        registry_sessions,
        storage: ScopeStorage,
        scope_prefix: str = DEFAULT_SCOPE_PREFIX,
    ):
        self.registry_sessions = registry_sessions
        self.storage = storage
        self.scope_prefix = scope_prefix
        self._handles: Dict[str, TenantHandles] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    @asynccontextmanager
    async def _registry(self):
        async with self.registry_sessions() as session:
            async with SqlAlchemyUnitOfWork(session) as uow:
                yield uow

    def _lock_for(self, scope_id: str) -> asyncio.Lock:
        lock = self._locks.get(scope_id)
        if lock is None:
            lock = self._locks[scope_id] = asyncio.Lock()
        return lock

    async def _is_registered(self, scope_id: str) -> bool:
        async with self._registry() as uow:
            tenant = await uow.tenants.get_by_scope_id(scope_id)
            return tenant is not None

    async def resolve(self, tenant_public_id: str) -> str:
        slug = normalize_tenant_identifier(tenant_public_id)

        async with self._registry() as uow:
            tenant = await uow.tenants.get_by_slug(slug)
            if tenant is None or tenant.status != TenantStatus.active:
                raise TenantNotFound(slug)
            return tenant.scope_id

    async def handles_for(self, scope_id: str) -> TenantHandles:
        scope_id = validate_scope_id(scope_id, self.scope_prefix)

        handles = self._handles.get(scope_id)
        if handles is not None:
            return handles

        async with self._lock_for(scope_id):
            # Another task may have finished while we waited
            handles = self._handles.get(scope_id)
            if handles is not None:
                return handles

            try:
                if not await self._is_registered(scope_id):
                    raise TenantNotFound(scope_id)
                engine = await self.storage.attach(scope_id)
            except TenantNotFound:
                # unknown identifiers must not accumulate locks
                self._locks.pop(scope_id, None)
                raise
            except StorefrontError:
                raise
            except Exception as exc:
                logger.error(f"Failed to attach data scope {scope_id}: {exc}")
                raise ScopeUnavailable(scope_id, str(exc)) from exc

            handles = TenantHandles(scope_id, engine)
            self._handles[scope_id] = handles
            logger.info(f"Attached data scope {scope_id}")
            return handles

    async def provision(self, scope_id: str, initial_owner: InitialOwner) -> TenantHandles:
        """
        Create the scope storage and seed its owner.

        The registry record must already exist. On failure everything
        created here is removed, the registry record is deleted, and
        ProvisioningFailed is raised.
        """
        scope_id = validate_scope_id(scope_id, self.scope_prefix)
        storage_created = False

        try:
            await self.storage.create(scope_id)
            storage_created = True

            handles = await self.handles_for(scope_id)
            uow = handles.unit_of_work()
            async with uow:
                await uow.users.create(
                    User(
                        email=initial_owner.email,
                        name=initial_owner.name,
                        password_hash=initial_owner.password_hash,
                        role=UserRole.owner,
                    )
                )
                await uow.commit()
        except Exception as exc:
            logger.error(f"Provisioning of scope {scope_id} failed: {exc}")
            await self._compensate(scope_id, storage_created)
            raise ProvisioningFailed(scope_id, str(exc)) from exc

        logger.info(f"Provisioned data scope {scope_id} with owner {initial_owner.email}")
        return handles

    async def _compensate(self, scope_id: str, drop_storage: bool):
        handles = self._handles.pop(scope_id, None)
        self._locks.pop(scope_id, None)
        if handles is not None:
            try:
                await handles.dispose()
            except Exception:
                logger.exception(f"Rollback: failed to dispose handles of {scope_id}")

        if drop_storage:
            try:
                await self.storage.drop(scope_id)
            except Exception:
                logger.exception(f"Rollback: failed to drop storage of {scope_id}")

        try:
            await self._delete_registry_record(scope_id)
        except Exception:
            logger.exception(f"Rollback: failed to delete registry record of {scope_id}")

    async def _delete_registry_record(self, scope_id: str) -> bool:
        async with self._registry() as uow:
            tenant = await uow.tenants.get_by_scope_id(scope_id)
            if tenant is None:
                return False
            await uow.tenants.delete(tenant)
            await uow.commit()
            return True

    async def destroy(self, scope_id: str) -> None:
        scope_id = validate_scope_id(scope_id, self.scope_prefix)

        async with self._lock_for(scope_id):
            if not await self._is_registered(scope_id):
                self._locks.pop(scope_id, None)
                raise TenantNotFound(scope_id)

            handles = self._handles.pop(scope_id, None)
            if handles is not None:
                await handles.dispose()

            # Storage goes before the registry record
            await self.storage.drop(scope_id)
            await self._delete_registry_record(scope_id)

        self._locks.pop(scope_id, None)
        logger.info(f"Destroyed data scope {scope_id}")

    async def close(self) -> None:
        handles, self._handles = list(self._handles.values()), {}
        for item in handles:
            await item.dispose()
