"""ReconcileLedger Use Case

Reconciles cached account balances against transaction history to detect discrepancies.
"""

import logging
import time
from datetime import datetime
from typing import List
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.repositories.credit_account_repository import CreditAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_transaction import CreditType
from .dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileLedger:
    """
    Use Case: Reconcile credit accounts against transactions

    Business Rules:
    1. For every account and credit type, the signed transaction sum must
       equal the cached balance
    2. Mismatches are reported and logged, never repaired (read-only)

    Flow:
    1. Get all accounts
    2. For each account:
       a. Sum its transactions per credit type
       b. Compare with current_credit and bonus_credit
       c. Record any mismatch
    3. Return reconciliation result with all discrepancies
    """

    def __init__(
        self,
        account_repo: CreditAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting credit ledger reconciliation")

            # Step 1: Get all accounts
            accounts = await self.account_repo.get_all()
            total_accounts = len(accounts)

            # Step 2: Compare each balance with its transaction sum
            discrepancies: List[LedgerDiscrepancyDTO] = []

            for account in accounts:
                sums = await self.transaction_repo.get_balance_sums(account.id)

                for credit_type in CreditType:
                    cached = account.balance_of(credit_type)
                    calculated = sums.get(credit_type, 0)
                    if cached == calculated:
                        continue

                    discrepancies.append(
                        LedgerDiscrepancyDTO(
                            account_id=account.account_id,
                            credit_account_id=account.id,
                            credit_type=credit_type.value,
                            cached_balance=cached,
                            calculated_balance=calculated,
                            discrepancy=cached - calculated,
                        )
                    )
                    logger.warning(
                        f"Discrepancy for {account.account_id} ({credit_type.value}): "
                        f"cached={cached}, transaction_sum={calculated}, "
                        f"discrepancy={cached - calculated}"
                    )

            # Step 3: Build response
            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"across {total_accounts} accounts in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_accounts} accounts balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(
                ReconciliationResultDTO(
                    total_accounts_checked=total_accounts,
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.RECONCILIATION_FAILED,
                    message="Failed to reconcile credit ledger",
                    reason=str(e),
                )
            )
