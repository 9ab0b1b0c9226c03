from abc import ABC, abstractmethod

from src.domain.entities import User


class IUserRepository(ABC):
    """Shop staff repository interface - application layer"""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Add a staff account to the scope"""
        pass
