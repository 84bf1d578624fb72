"""Ledger Reconciliation Worker

Re-sums every account's transactions per credit type and compares them with
the cached current/bonus balances. Runs once per invocation; an external
scheduler decides when.
"""

import asyncio
import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.database import serialize_sqlite_writers
from src.adapter.repositories.credit_account_repository import SqlAlchemyCreditAccountRepository
from src.adapter.repositories.credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from src.app.use_cases.credits import ReconcileLedger, ReconciliationResultDTO

logger = logging.getLogger(__name__)


def drift_by_credit_type(result: ReconciliationResultDTO) -> Dict[str, int]:
    """Net cached-minus-calculated difference per credit type"""
    drift: Dict[str, int] = defaultdict(int)
    for d in result.discrepancies:
        drift[d.credit_type] += d.discrepancy
    return dict(drift)


class LedgerReconcilerWorker:
    """
    Read-only reconciliation of the credit ledger

    Usage:
        worker = LedgerReconcilerWorker()
        result = await worker.run_once()
        await worker.shutdown()
    """

    def __init__(self, db_uri: Optional[str] = None):
        """
        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.engine = serialize_sqlite_writers(
            create_async_engine(self.db_uri, echo=False, future=True)
        )
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("LedgerReconcilerWorker initialized")

    async def run_once(self) -> ReconciliationResultDTO:
        """
        Reconcile all accounts

        Raises:
            RuntimeError: If the accounts or their sums could not be read
        """
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Ledger reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_accounts_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            result = await ReconcileLedger(
                account_repo=SqlAlchemyCreditAccountRepository(session),
                transaction_repo=SqlAlchemyCreditTransactionRepository(session),
            ).execute()

        if result.is_err():
            logger.error(f"Reconciliation failed: {result.error.message} ({result.error.reason})")
            raise RuntimeError(f"Reconciliation failed: {result.error.message}")

        response = result.value
        if response.discrepancies_found:
            for credit_type, drift in drift_by_credit_type(response).items():
                logger.error(f"ALERT: {credit_type} balances drift by {drift:+d} from the transaction log")
        return response

    async def shutdown(self):
        await self.engine.dispose()
        logger.info("LedgerReconcilerWorker shutdown complete")


async def main():
    """
    Cron entry point: python -m src.worker.ledger_reconciler

    Exits 1 when any account is out of balance.
    """
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    worker = LedgerReconcilerWorker()
    try:
        result = await worker.run_once()
    finally:
        await worker.shutdown()

    print(
        f"Checked {result.total_accounts_checked} accounts in {result.execution_time_ms}ms, "
        f"{result.discrepancies_found} discrepancies"
    )
    for d in result.discrepancies:
        print(f"  {d.account_id} {d.credit_type}: cached={d.cached_balance} log={d.calculated_balance}")
    return 1 if result.discrepancies_found else 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
