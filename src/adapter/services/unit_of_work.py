from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.category_repository import CategoryRepository
from src.adapter.repositories.customer_repository import CustomerRepository
from src.adapter.repositories.order_repository import OrderRepository
from src.adapter.repositories.product_repository import ProductRepository
from src.adapter.repositories.tenant_repository import TenantRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import TenantUnitOfWork, UnitOfWork

# SQLSTATE serialization_failure and deadlock_detected
TRANSIENT_SQLSTATES = frozenset({"40001", "40P01"})
TRANSIENT_SQLITE_MESSAGES = ("database is locked", "database is busy", "database table is locked")


def is_transient_storage_error(exc: BaseException) -> bool:
    if isinstance(exc, StaleDataError):
        return True
    if not isinstance(exc, DBAPIError):
        return False
    if exc.connection_invalidated:
        return True

    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in TRANSIENT_SQLSTATES:
        return True
    if isinstance(exc, OperationalError):
        message = str(orig).lower()
        return any(marker in message for marker in TRANSIENT_SQLITE_MESSAGES)
    return False


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of the platform UnitOfWork"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.tenants = TenantRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()


class SqlAlchemyTenantUnitOfWork(TenantUnitOfWork):
    """
    SQLAlchemy implementation of the tenant-scope UnitOfWork.

    Opens its own session from the scope's session factory so that every
    transaction attempt starts from a clean identity map.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self.session = None

    async def __aenter__(self):
        self.session = self.session_factory()
        self.products = ProductRepository(self.session)
        self.categories = CategoryRepository(self.session)
        self.customers = CustomerRepository(self.session)
        self.orders = OrderRepository(self.session)
        self.users = UserRepository(self.session)
        return self

    async def __aexit__(self, *args):
        try:
            # Loaded entities outlive the session; keep their state intact.
            self.session.expunge_all()
            await self.rollback()
        finally:
            await self.session.close()
            self.session = None

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()

    def is_transient(self, exc: BaseException) -> bool:
        return is_transient_storage_error(exc)
