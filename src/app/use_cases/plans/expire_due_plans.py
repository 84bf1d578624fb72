"""ExpireDuePlans Use Case

Closes active plans whose validity window has ended and activates the next
reserved plan of each affected account. Invoked by an external scheduler.
"""

import logging
from datetime import datetime, timezone
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.credit_ledger import CreditLedger
from src.app.services.plan_activation import PlanActivator
from src.app.repositories.credit_account_repository import CreditAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.app.repositories.plan_instance_repository import PlanInstanceRepository
from src.domain.plan_instance import PlanInstanceStatus
from .dtos import ExpirePlansResultDTO

logger = logging.getLogger(__name__)


class ExpireDuePlans:
    """
    Use Case: Expire due plans

    Business Rules:
    1. Every active instance with expires_at <= now is closed as EXPIRED
    2. The oldest reserved instance of that account is activated and its
       credit granted; its validity window starts at now
    3. Each account is handled in its own transaction; one failing account
       is rolled back and counted without stopping the sweep
    4. Idempotent for a given now: a second run finds nothing due

    Flow:
    1. Collect (instance id, account id) of due instances
    2. For each: lock account, re-read instance, close + promote, commit
    3. Return counts
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        transaction_repo: CreditTransactionRepository,
        plan_repo: PlanInstanceRepository,
    ):
        self.uow = uow
        self.plan_repo = plan_repo
        self.ledger = CreditLedger(account_repo, transaction_repo)
        self.activator = PlanActivator(self.ledger, plan_repo)

    async def execute(self, now: datetime) -> Result[ExpirePlansResultDTO]:
        """
        Execute the expiry sweep

        Args:
            now: Reference instant supplied by the scheduler

        Returns:
            Result[ExpirePlansResultDTO]: Counts of expired, activated and failed
        """
        if now.tzinfo is not None:
            # Stored timestamps are naive UTC
            now = now.astimezone(timezone.utc).replace(tzinfo=None)

        try:
            due = await self.plan_repo.get_due_active(now)
            # Plain values only: a rollback below expires loaded entities
            targets = [(instance.id, instance.account_id) for instance in due]
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Could not load due plans: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.EXPIRE_PLANS_FAILED,
                    message="Failed to load due plans",
                    reason=str(e),
                )
            )

        logger.info(f"Expiry sweep at {now.isoformat()}: {len(targets)} due plan(s)")

        expired_count = 0
        activated_count = 0
        failed_count = 0

        for instance_id, account_id in targets:
            try:
                await self.ledger.lock_account(account_id)
                instance = await self.plan_repo.get_by_id(instance_id, for_update=True)
                if instance is None or not instance.is_active or not instance.is_expired(now):
                    await self.uow.rollback()
                    continue

                promoted = await self.activator.close_and_promote(instance, PlanInstanceStatus.EXPIRED, now)
                await self.uow.commit()

                expired_count += 1
                if promoted is not None:
                    activated_count += 1

            except Exception as e:
                await self.uow.rollback()
                failed_count += 1
                logger.error(f"Failed to expire plan instance {instance_id} for {account_id}: {e}")

        logger.info(
            f"Expiry sweep complete: expired={expired_count}, "
            f"activated={activated_count}, failed={failed_count}"
        )

        return Return.ok(
            ExpirePlansResultDTO(
                expired_count=expired_count,
                activated_count=activated_count,
                failed_count=failed_count,
                run_at=now,
            )
        )
