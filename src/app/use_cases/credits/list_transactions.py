"""
List Transactions Use Case

Retrieves credit transaction history for an account with pagination.
"""
import logging
from typing import Optional
from libs.result import Result, Return, Error
from libs.retry import RetryPolicy, NO_RETRY, call_with_retry
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_transaction import CreditType, TransactionType
from .dtos import ListTransactionsResponseDTO, TransactionDTO
from .validators import validate_account_id

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class ListTransactions:
    """
    Use case: View Credit Transactions

    Retrieves paginated transaction history for an account, newest first,
    optionally filtered by credit type and transaction type.
    """

    def __init__(
        self,
        transaction_repo: CreditTransactionRepository,
        uow: Optional[UnitOfWork] = None,
        retry_policy: RetryPolicy = NO_RETRY,
    ):
        self.transaction_repo = transaction_repo
        self.uow = uow
        self.retry_policy = retry_policy

    async def execute(
        self,
        account_id: str,
        limit: int = 20,
        offset: int = 0,
        credit_type: Optional[CreditType] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> Result[ListTransactionsResponseDTO]:
        """
        List transactions for an account with pagination.

        Args:
            account_id: Business account identifier
            limit: Maximum number of transactions to return (clamped to 1..100)
            offset: Number of transactions to skip (negative treated as 0)
            credit_type: Optional CURRENT/BONUS filter
            transaction_type: Optional transaction type filter

        Returns:
            Result[ListTransactionsResponseDTO]: Paginated transaction list
        """
        checked = validate_account_id(account_id)
        if checked.is_err():
            return checked

        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)

        try:
            transactions, total = await call_with_retry(
                lambda: self.transaction_repo.get_by_account_id(
                    account_id=account_id,
                    limit=limit,
                    offset=offset,
                    credit_type=credit_type,
                    transaction_type=transaction_type,
                ),
                self.retry_policy,
                on_retry=self.uow.rollback if self.uow else None,
            )
        except Exception as e:
            logger.error(f"Transaction history lookup failed for {account_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.LIST_TRANSACTIONS_FAILED,
                    message="Failed to list transactions",
                    reason=str(e),
                    details={"account_id": account_id},
                )
            )

        return Return.ok(
            ListTransactionsResponseDTO(
                transactions=[TransactionDTO.from_entity(txn) for txn in transactions],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
