"""Credit Ledger Service

The only writer of CreditAccount balances. Every balance change appends one
CreditTransaction in the same unit of work. The ledger never commits; the
calling use case owns the transaction boundary and the account row lock
taken here lives until that boundary ends.
"""

import logging
from typing import List, Optional
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.repositories.credit_account_repository import CreditAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_account import CreditAccount, DebitPreference
from src.domain.credit_transaction import CreditTransaction, CreditType, TransactionType

logger = logging.getLogger(__name__)


class CreditLedger:
    """
    Atomic debit/credit over an account's current and bonus balances

    Business Rules:
    1. Balances never go negative
    2. debit is all-or-nothing: an insufficient total changes nothing
    3. One transaction per affected balance (a debit may produce two)
    4. credit requires a positive amount and creates the account on demand
    5. Read-check-write-append runs under the account row lock
    """

    def __init__(
        self,
        account_repo: CreditAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def get_account(self, account_id: str) -> Optional[CreditAccount]:
        """Unlocked read for reporting"""
        return await self.account_repo.get_by_account_id(account_id)

    async def lock_account(self, account_id: str) -> Optional[CreditAccount]:
        """Take the per-account lock (SELECT FOR UPDATE) if the account exists"""
        return await self.account_repo.get_by_account_id(account_id, for_update=True)

    async def get_or_create_account(self, account_id: str) -> CreditAccount:
        """Lock the account, creating it with zero balances on first use"""
        account = await self.lock_account(account_id)
        if account is None:
            account = await self.account_repo.create(CreditAccount(account_id=account_id))
            logger.info(f"Created credit account for {account_id}")
        return account

    async def credit(
        self,
        account_id: str,
        amount: int,
        credit_type: CreditType,
        reason: str,
        transaction_type: TransactionType = TransactionType.ADMIN_ADD,
        reference_type: Optional[str] = None,
        reference_id: Optional[str] = None,
        description: Optional[str] = None,
        account: Optional[CreditAccount] = None,
    ) -> Result[CreditTransaction]:
        """
        Increase one balance and append its transaction

        Args:
            account_id: Business account identifier
            amount: Positive amount in currency minor units
            credit_type: Balance to increase
            reason: Activity key or admin note recorded on the transaction
            transaction_type: Transaction type to record
            account: Account already locked by the caller; locked or created here when omitted

        Returns:
            Result[CreditTransaction]: The appended transaction, or INVALID_AMOUNT
        """
        if amount <= 0:
            return Return.err(
                Error(
                    code=ErrorCode.INVALID_AMOUNT,
                    message=f"Credit amount must be positive, got {amount}",
                    details={"account_id": account_id, "amount": amount},
                )
            )

        if account is None:
            account = await self.get_or_create_account(account_id)
        transaction = await self._append(
            account, credit_type, amount, transaction_type, reason,
            reference_type, reference_id, description,
        )
        return Return.ok(transaction)

    async def debit(
        self,
        account_id: str,
        amount: int,
        preference: DebitPreference,
        reason: str,
        transaction_type: TransactionType = TransactionType.CONSUME,
        reference_type: Optional[str] = None,
        reference_id: Optional[str] = None,
        description: Optional[str] = None,
        account: Optional[CreditAccount] = None,
    ) -> Result[List[CreditTransaction]]:
        """
        Decrease balances by amount, preferred balance first

        Args:
            account_id: Business account identifier
            amount: Positive amount in currency minor units
            preference: BONUS_FIRST or CURRENT_FIRST
            reason: Activity key or admin note recorded on each transaction
            account: Account already locked by the caller; locked here when omitted

        Returns:
            Result[List[CreditTransaction]]: One transaction per affected balance,
            or INVALID_AMOUNT / ACCOUNT_NOT_FOUND / INSUFFICIENT_CREDIT with no
            change applied
        """
        if amount <= 0:
            return Return.err(
                Error(
                    code=ErrorCode.INVALID_AMOUNT,
                    message=f"Debit amount must be positive, got {amount}",
                    details={"account_id": account_id, "amount": amount},
                )
            )

        if account is None:
            account = await self.lock_account(account_id)
        if account is None:
            return Return.err(
                Error(
                    code=ErrorCode.ACCOUNT_NOT_FOUND,
                    message=f"Credit account not found for {account_id}",
                    details={"account_id": account_id, "amount": amount},
                )
            )

        if account.total_credit < amount:
            logger.warning(
                f"Insufficient credit for {account_id}: required={amount}, "
                f"current={account.current_credit}, bonus={account.bonus_credit}"
            )
            return Return.err(
                Error(
                    code=ErrorCode.INSUFFICIENT_CREDIT,
                    message=f"Insufficient credits. Required: {amount}, Available: {account.total_credit}",
                    reason=f"current={account.current_credit}, bonus={account.bonus_credit}, required={amount}",
                    details={
                        "account_id": account_id,
                        "amount": amount,
                        "current_credit": account.current_credit,
                        "bonus_credit": account.bonus_credit,
                    },
                )
            )

        transactions = []
        for credit_type, share in account.plan_debit(amount, preference):
            transaction = await self._append(
                account, credit_type, -share, transaction_type, reason,
                reference_type, reference_id, description,
            )
            transactions.append(transaction)

        return Return.ok(transactions)

    async def _append(
        self,
        account: CreditAccount,
        credit_type: CreditType,
        delta: int,
        transaction_type: TransactionType,
        reason: str,
        reference_type: Optional[str],
        reference_id: Optional[str],
        description: Optional[str],
    ) -> CreditTransaction:
        balance_after = account.apply(credit_type, delta)
        await self.account_repo.update(account)

        transaction = CreditTransaction(
            account_id=account.account_id,
            credit_account_id=account.id,
            transaction_type=transaction_type,
            credit_type=credit_type,
            amount=delta,
            balance_after=balance_after,
            reason=reason,
            reference_type=reference_type,
            reference_id=reference_id,
            description=description,
        )
        created = await self.transaction_repo.create(transaction)

        logger.info(
            f"{transaction_type.value} {delta:+d} {credit_type.value} on {account.account_id} "
            f"({reason}), balance_after={balance_after}"
        )
        return created
