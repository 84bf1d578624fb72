"""Plan activation and promotion of reserved plan instances"""

import logging
from datetime import datetime
from typing import List, Optional
from src.app.repositories.plan_instance_repository import PlanInstanceRepository
from src.app.services.credit_ledger import CreditLedger
from src.domain.credit_transaction import CreditTransaction, CreditType, TransactionType
from src.domain.plan_instance import PlanInstance, PlanInstanceStatus

logger = logging.getLogger(__name__)


class PlanActivator:
    """
    Activates plan instances and grants their credit through the ledger

    Callers must hold the account lock and commit afterwards.
    """

    def __init__(self, ledger: CreditLedger, plan_repo: PlanInstanceRepository):
        self.ledger = ledger
        self.plan_repo = plan_repo

    async def grant(self, instance: PlanInstance) -> List[CreditTransaction]:
        """Credit the instance's current and bonus amounts (zero amounts are skipped)"""
        grants = []
        for credit_type, amount in (
            (CreditType.CURRENT, instance.credit_amount),
            (CreditType.BONUS, instance.bonus_credit),
        ):
            if amount <= 0:
                continue
            result = await self.ledger.credit(
                instance.account_id,
                amount,
                credit_type,
                reason=f"PLAN_LEVEL_{instance.plan_level}",
                transaction_type=TransactionType.PURCHASE_GRANT,
                reference_type="plan_instance",
                reference_id=str(instance.id),
            )
            grants.append(result.value)
        return grants

    async def activate(self, instance: PlanInstance, now: datetime) -> List[CreditTransaction]:
        """Activate a reserved instance; its validity window starts now"""
        instance.activate(now)
        await self.plan_repo.update(instance)
        grants = await self.grant(instance)
        logger.info(
            f"Activated plan instance {instance.id} (level {instance.plan_level}) "
            f"for {instance.account_id}, expires_at={instance.expires_at.isoformat()}"
        )
        return grants

    async def promote_next_reserved(self, account_id: str, now: datetime) -> Optional[PlanInstance]:
        """Activate the oldest reserved instance, if any"""
        reserved = await self.plan_repo.get_reserved_by_account_id(account_id)
        if not reserved:
            return None
        next_instance = reserved[0]
        await self.activate(next_instance, now)
        return next_instance

    async def close_and_promote(
        self,
        instance: PlanInstance,
        status: PlanInstanceStatus,
        now: datetime,
    ) -> Optional[PlanInstance]:
        """Close the active instance as EXPIRED or EXHAUSTED and promote the next one"""
        instance.close(status, now)
        await self.plan_repo.update(instance)
        logger.info(
            f"Closed plan instance {instance.id} (level {instance.plan_level}) "
            f"for {instance.account_id} as {status.value}"
        )
        return await self.promote_next_reserved(instance.account_id, now)
