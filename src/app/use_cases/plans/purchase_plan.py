"""PurchasePlan Use Case

Records a plan purchase. The purchase is activated immediately when the
account has no running plan, otherwise it is queued as reserved.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.plan_catalog import PlanCatalog
from src.app.services.credit_ledger import CreditLedger
from src.app.services.plan_activation import PlanActivator
from src.app.repositories.credit_account_repository import CreditAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.app.repositories.plan_instance_repository import PlanInstanceRepository
from src.app.use_cases.credits.validators import validate_account_id, validate_plan_level
from src.domain.plan_instance import PlanInstance, PlanInstanceStatus
from .dtos import PurchasePlanCommandDTO, PlanInstanceDTO

logger = logging.getLogger(__name__)


class PurchasePlan:
    """
    Use Case: Purchase a plan

    Business Rules:
    1. Plan level must exist and be ACTIVE (UNKNOWN_PLAN_LEVEL)
    2. Plan terms are snapshotted on the instance
    3. No running plan: the instance becomes active and its credit_amount
       (CURRENT) and bonus_credit (BONUS) are granted now
    4. Running, unexpired plan: the instance is reserved, no credit granted
    5. An active plan already past expires_at is closed as EXPIRED first
       and the reserved queue moves up before the new instance is placed
    6. At most one active instance per account

    Flow:
    1. Validate input and look up the plan
    2. Lock (or create) the credit account
    3. Settle an overdue active plan
    4. Create the instance as active or reserved
    5. Grant credit if active
    6. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        transaction_repo: CreditTransactionRepository,
        plan_repo: PlanInstanceRepository,
        plan_catalog: PlanCatalog,
    ):
        self.uow = uow
        self.plan_repo = plan_repo
        self.plan_catalog = plan_catalog
        self.ledger = CreditLedger(account_repo, transaction_repo)
        self.activator = PlanActivator(self.ledger, plan_repo)

    async def execute(
        self,
        command: PurchasePlanCommandDTO,
        now: Optional[datetime] = None,
    ) -> Result[PlanInstanceDTO]:
        """
        Execute plan purchase

        Args:
            command: PurchasePlanCommandDTO with account_id and plan_level
            now: Purchase instant (defaults to utcnow)

        Returns:
            Result[PlanInstanceDTO]: The created instance
        """
        # Step 1: Validate and look up plan
        for checked in (validate_account_id(command.account_id), validate_plan_level(command.plan_level)):
            if checked.is_err():
                return checked

        plan = self.plan_catalog.get_purchasable(command.plan_level)
        if plan is None:
            return Return.err(
                Error(
                    code=ErrorCode.UNKNOWN_PLAN_LEVEL,
                    message=f"Plan level {command.plan_level} does not exist or is not active",
                    details={"account_id": command.account_id, "plan_level": command.plan_level},
                )
            )

        try:
            now = now or datetime.utcnow()

            # Step 2: Serialize on the account row
            await self.ledger.get_or_create_account(command.account_id)

            # Step 3: Settle an active plan the expiry sweep has not reached yet
            active = await self.plan_repo.get_active_by_account_id(command.account_id)
            if active is not None and active.is_expired(now):
                active = await self.activator.close_and_promote(active, PlanInstanceStatus.EXPIRED, now)

            # Step 4: Create the instance
            instance = PlanInstance(
                account_id=command.account_id,
                plan_level=plan.level,
                price=plan.price,
                credit_amount=plan.credit_amount,
                bonus_credit=plan.bonus_credit,
                expiry_days=plan.expiry_days,
                purchased_at=now,
                expires_at=now + timedelta(days=plan.expiry_days),
                is_active=False,
                is_reserved=True,
                status=PlanInstanceStatus.RESERVED,
            )
            if active is None:
                instance.activate(now)

            instance = await self.plan_repo.create(instance)

            # Step 5: Grant credit for an immediately active plan
            if instance.is_active:
                await self.activator.grant(instance)

            # Step 6: Commit
            await self.uow.commit()

            logger.info(
                f"Account {command.account_id} purchased plan level {plan.level} "
                f"({'active' if instance.is_active else 'reserved'}, instance {instance.id})"
            )

            return Return.ok(PlanInstanceDTO.from_entity(instance))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Plan purchase failed for {command.account_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.PURCHASE_PLAN_FAILED,
                    message="Failed to purchase plan",
                    reason=str(e),
                    details={"account_id": command.account_id, "plan_level": command.plan_level},
                )
            )
