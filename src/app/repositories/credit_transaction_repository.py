"""Credit Transaction Repository Interface

Defines the contract for credit transaction persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple
from src.domain.credit_transaction import CreditTransaction, CreditType, TransactionType


class CreditTransactionRepository(ABC):
    """
    Repository interface for CreditTransaction persistence

    Transactions are immutable and append-only for audit trail.
    """

    @abstractmethod
    async def create(self, transaction: CreditTransaction) -> CreditTransaction:
        """
        Append a new credit transaction

        Args:
            transaction: CreditTransaction entity to persist

        Returns:
            Created CreditTransaction with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: int) -> Optional[CreditTransaction]:
        """
        Retrieve transaction by ID

        Args:
            transaction_id: Transaction ID

        Returns:
            CreditTransaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_account_id(
        self,
        account_id: str,
        limit: int = 20,
        offset: int = 0,
        credit_type: Optional[CreditType] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> Tuple[List[CreditTransaction], int]:
        """
        Retrieve an account's transactions, newest first

        Args:
            account_id: Business account identifier
            limit: Maximum number of rows to return
            offset: Number of rows to skip
            credit_type: Optional filter on the affected balance
            transaction_type: Optional filter on the transaction type

        Returns:
            Tuple of (page of transactions, total matching count)
        """
        pass

    @abstractmethod
    async def get_balance_sums(self, credit_account_id: int) -> Dict[CreditType, int]:
        """
        Sum signed transaction amounts per credit type

        Args:
            credit_account_id: CreditAccount row ID

        Returns:
            Mapping with an entry for every CreditType (0 when there are no rows)
        """
        pass
