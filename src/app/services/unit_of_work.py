from abc import ABC, abstractmethod

from src.app.repositories.category_repository import ICategoryRepository
from src.app.repositories.customer_repository import ICustomerRepository
from src.app.repositories.order_repository import IOrderRepository
from src.app.repositories.product_repository import IProductRepository
from src.app.repositories.tenant_repository import ITenantRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract platform UnitOfWork - tenant registry access and transactions"""

    # Repository properties (initialized in __aenter__)
    tenants: ITenantRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass


class TenantUnitOfWork(ABC):
    """
    Abstract UnitOfWork bound to one tenant scope.

    The repositories are the scope's collection handles; everything done
    through one instance commits or rolls back together.
    """

    # Repository properties (initialized in __aenter__)
    products: IProductRepository
    categories: ICategoryRepository
    customers: ICustomerRepository
    orders: IOrderRepository
    users: IUserRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    @abstractmethod
    def is_transient(self, exc: BaseException) -> bool:
        """True when exc is a storage conflict that is safe to retry"""
        pass
