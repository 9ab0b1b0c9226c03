import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.scope_storage import ScopeStorage, create_platform_schema
from src.adapter.services.tenant_router import SqlAlchemyTenantDataRouter
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_fulfillment_options, get_tenant_router, get_unit_of_work


@pytest_asyncio.fixture
async def platform_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/platform.db")
    async with engine.begin() as conn:
        await conn.run_sync(create_platform_schema)
    yield engine
    await engine.dispose()


@pytest.fixture
def registry_sessions(platform_engine):
    return sessionmaker(
        platform_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
def tenant_db_dir(tmp_path):
    return tmp_path / "tenants"


@pytest.fixture
def scope_storage(tenant_db_dir):
    return ScopeStorage(
        f"sqlite+aiosqlite:///{tenant_db_dir}/{{scope}}.db", operation_timeout=5
    )


@pytest_asyncio.fixture
async def tenant_router(registry_sessions, scope_storage):
    router = SqlAlchemyTenantDataRouter(registry_sessions, scope_storage)
    yield router
    await router.close()


@pytest_asyncio.fixture
async def client(registry_sessions, tenant_router):
    from src.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        async with registry_sessions() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_tenant_router] = lambda: tenant_router
    app.dependency_overrides[get_fulfillment_options] = lambda: {
        "max_attempts": 5,
        "initial_delay": 0.01,
    }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
