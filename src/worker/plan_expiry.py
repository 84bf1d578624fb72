"""Plan Expiry Worker

Closes plans whose validity window has ended and activates queued reserved
plans. Runs once per invocation; an external scheduler decides when.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.database import serialize_sqlite_writers
from src.adapter.repositories.credit_account_repository import SqlAlchemyCreditAccountRepository
from src.adapter.repositories.credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from src.adapter.repositories.plan_instance_repository import SqlAlchemyPlanInstanceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.plans import ExpireDuePlans, ExpirePlansResultDTO

logger = logging.getLogger(__name__)


class PlanExpiryWorker:
    """
    Background worker for the plan expiry sweep

    Usage:
        worker = PlanExpiryWorker()
        result = await worker.run_once()
        await worker.shutdown()
    """

    def __init__(self, db_uri: Optional[str] = None):
        """
        Initialize the worker

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

        logger.info("PlanExpiryWorker initialized")

    async def run_once(self, now: Optional[datetime] = None) -> ExpirePlansResultDTO:
        """
        Run the expiry sweep once

        Args:
            now: Reference instant (defaults to utcnow); the same now may be
                passed again safely

        Returns:
            ExpirePlansResultDTO with counts

        Raises:
            RuntimeError: If due plans could not be loaded
        """
        now = now or datetime.utcnow()

        if not ApplicationConfig.PLAN_EXPIRY_ENABLED:
            logger.info("Plan expiry is disabled, skipping")
            return ExpirePlansResultDTO(
                expired_count=0,
                activated_count=0,
                failed_count=0,
                run_at=now,
            )

        async with self.async_session_factory() as session:
            use_case = ExpireDuePlans(
                uow=SqlAlchemyUnitOfWork(session),
                account_repo=SqlAlchemyCreditAccountRepository(session),
                transaction_repo=SqlAlchemyCreditTransactionRepository(session),
                plan_repo=SqlAlchemyPlanInstanceRepository(session),
            )

            result = await use_case.execute(now)

            if result.is_err():
                logger.error(f"Plan expiry failed: {result.error.message}")
                raise RuntimeError(f"Plan expiry failed: {result.error.message}")

            response = result.value
            if response.failed_count:
                logger.error(f"{response.failed_count} plan(s) could not be expired")

            return response

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("PlanExpiryWorker shutdown complete")


async def main(argv=None):
    """
    Entry point for cron

    Usage:
        python -m src.worker.plan_expiry
        python -m src.worker.plan_expiry --now 2024-06-01T00:00:00
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Plan Expiry Worker")
    parser.add_argument(
        "--now", type=datetime.fromisoformat, default=None,
        help="Reference instant in ISO 8601 (default: current UTC time)"
    )
    args = parser.parse_args(argv)

    worker = PlanExpiryWorker()

    try:
        result = await worker.run_once(args.now)
        print("Plan expiry complete:")
        print(f"  Expired: {result.expired_count}")
        print(f"  Activated: {result.activated_count}")
        print(f"  Failed: {result.failed_count}")
        return 1 if result.failed_count else 0
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
