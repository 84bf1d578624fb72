"""Credit Account Repository Interface

Defines the contract for credit account persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.credit_account import CreditAccount


class CreditAccountRepository(ABC):
    """
    Repository interface for CreditAccount persistence

    Methods use pessimistic locking (SELECT FOR UPDATE) to serialize
    balance mutations per account.
    """

    @abstractmethod
    async def get_by_account_id(self, account_id: str, for_update: bool = False) -> Optional[CreditAccount]:
        """
        Retrieve credit account by business account ID

        Args:
            account_id: Business account identifier
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            CreditAccount if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, account: CreditAccount) -> CreditAccount:
        """
        Create a new credit account

        Args:
            account: CreditAccount entity to persist

        Returns:
            Created CreditAccount with generated ID
        """
        pass

    @abstractmethod
    async def update(self, account: CreditAccount) -> CreditAccount:
        """
        Persist changed balances of an already loaded account

        Args:
            account: CreditAccount entity, normally locked by the caller

        Returns:
            Updated CreditAccount
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[CreditAccount]:
        """
        Retrieve all credit accounts

        Returns:
            List of all CreditAccount entities ordered by ID
        """
        pass
