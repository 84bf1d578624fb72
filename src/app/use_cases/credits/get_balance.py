"""Get Balance Use Case

Retrieves an account's current and bonus credit balances.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from libs.retry import RetryPolicy, NO_RETRY, call_with_retry
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.credit_account_repository import CreditAccountRepository
from .dtos import BalanceResponseDTO
from .validators import validate_account_id

logger = logging.getLogger(__name__)


class GetBalance:
    """
    Get Balance Use Case

    Read-only operation; transient store errors are retried per retry_policy
    with a rollback between attempts.
    """

    def __init__(
        self,
        account_repo: CreditAccountRepository,
        uow: Optional[UnitOfWork] = None,
        retry_policy: RetryPolicy = NO_RETRY,
    ):
        """
        Initialize GetBalance use case

        Args:
            account_repo: Repository for accessing credit accounts
            uow: Unit of work rolled back between retry attempts
            retry_policy: Retry policy for transient store errors
        """
        self.account_repo = account_repo
        self.uow = uow
        self.retry_policy = retry_policy

    async def execute(self, account_id: str) -> Result[BalanceResponseDTO]:
        """
        Execute get balance operation

        Errors:
            INVALID_ACCOUNT_ID: Malformed account_id
            ACCOUNT_NOT_FOUND: Account has no credit account yet
            GET_BALANCE_FAILED: Store still failing after retries
        """
        checked = validate_account_id(account_id)
        if checked.is_err():
            return checked

        try:
            account = await call_with_retry(
                lambda: self.account_repo.get_by_account_id(account_id),
                self.retry_policy,
                on_retry=self.uow.rollback if self.uow else None,
            )
        except Exception as e:
            logger.error(f"Balance lookup failed for {account_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.GET_BALANCE_FAILED,
                    message="Failed to read balance",
                    reason=str(e),
                    details={"account_id": account_id},
                )
            )

        if not account:
            return Return.err(
                Error(
                    code=ErrorCode.ACCOUNT_NOT_FOUND,
                    message=f"No credit account found for {account_id}",
                    details={"account_id": account_id},
                )
            )

        return Return.ok(
            BalanceResponseDTO(
                account_id=account.account_id,
                current_credit=account.current_credit,
                bonus_credit=account.bonus_credit,
                total_credit=account.total_credit,
                last_updated=account.updated_at,
            )
        )
