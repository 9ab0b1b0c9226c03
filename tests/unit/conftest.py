import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.is_transient = MagicMock(return_value=False)
    return uow


@pytest.fixture
def uow_factory(mock_uow):
    """Factory handing out the same mocked tenant unit of work on every attempt"""
    return MagicMock(return_value=mock_uow)


@pytest.fixture
def no_sleep():
    return AsyncMock()
