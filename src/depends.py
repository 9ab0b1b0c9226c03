from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.scope_storage import ScopeStorage
from src.adapter.services.tenant_router import SqlAlchemyTenantDataRouter
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.tenant_router import ITenantHandles, TenantDataRouter
from src.domain.errors import InvalidTenantIdentifier

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

scope_storage = ScopeStorage(
    ApplicationConfig.TENANT_DB_URI_TEMPLATE,
    admin_url=ApplicationConfig.DB_URI,
    operation_timeout=ApplicationConfig.DB_OPERATION_TIMEOUT,
)

tenant_router = SqlAlchemyTenantDataRouter(
    AsyncSessionLocal,
    scope_storage,
    scope_prefix=ApplicationConfig.TENANT_SCOPE_PREFIX,
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_tenant_router() -> TenantDataRouter:
    return tenant_router


async def get_scope_id(
    x_tenant_id: str = Header(None),
    router: TenantDataRouter = Depends(get_tenant_router),
) -> str:
    """
    Resolve the X-Tenant-ID header (public shop slug) to a scope token.

    Raises:
        InvalidTenantIdentifier: header missing, malformed or reserved (400)
        TenantNotFound: no active tenant with that slug (404)
    """
    if x_tenant_id is None:
        raise InvalidTenantIdentifier(None)
    return await router.resolve(x_tenant_id)


async def get_tenant_handles(
    scope_id: str = Depends(get_scope_id),
    router: TenantDataRouter = Depends(get_tenant_router),
) -> ITenantHandles:
    return await router.handles_for(scope_id)


def get_fulfillment_options() -> dict:
    return {
        "max_attempts": ApplicationConfig.FULFILLMENT_MAX_ATTEMPTS,
        "initial_delay": ApplicationConfig.FULFILLMENT_INITIAL_BACKOFF_MS / 1000,
    }
