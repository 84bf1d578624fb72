from datetime import datetime
from itertools import count
from unittest.mock import AsyncMock, MagicMock
import pytest


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_account_repo():
    """Mock credit account repository; update echoes the entity back"""
    repo = MagicMock()
    repo.get_by_account_id = AsyncMock(return_value=None)
    repo.update = AsyncMock(side_effect=lambda account: account)
    repo.get_all = AsyncMock(return_value=[])

    async def create(account):
        account.id = 1
        return account

    repo.create = AsyncMock(side_effect=create)
    return repo


@pytest.fixture
def mock_transaction_repo():
    """Mock credit transaction repository; create assigns sequential IDs"""
    repo = MagicMock()
    ids = count(1)

    async def create(transaction):
        transaction.id = next(ids)
        transaction.created_at = datetime(2024, 1, 1, 12, 0, 0)
        return transaction

    repo.create = AsyncMock(side_effect=create)
    return repo


@pytest.fixture
def mock_plan_repo():
    """Mock plan instance repository with no plans"""
    repo = MagicMock()
    ids = count(100)

    async def create(instance):
        instance.id = next(ids)
        return instance

    repo.create = AsyncMock(side_effect=create)
    repo.update = AsyncMock(side_effect=lambda instance: instance)
    repo.get_active_by_account_id = AsyncMock(return_value=None)
    repo.get_reserved_by_account_id = AsyncMock(return_value=[])
    repo.get_due_active = AsyncMock(return_value=[])
    repo.get_history = AsyncMock(return_value=[])
    repo.get_by_id = AsyncMock(return_value=None)
    return repo
