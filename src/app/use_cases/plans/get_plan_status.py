"""Get Plan Status Use Case

Balances, active plan, reserved queue and purchase history of one account.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from libs.retry import RetryPolicy, NO_RETRY, call_with_retry
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.credit_account_repository import CreditAccountRepository
from src.app.repositories.plan_instance_repository import PlanInstanceRepository
from src.app.use_cases.credits.validators import validate_account_id
from .dtos import PlanInstanceDTO, PlanStatusDTO

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10


class GetPlanStatus:
    """
    Use Case: View plan status

    An account without a credit account yet gets zero balances and no plan.
    An active instance already past expires_at is reported as no active plan
    with zero days remaining until the expiry sweep closes it.
    """

    def __init__(
        self,
        account_repo: CreditAccountRepository,
        plan_repo: PlanInstanceRepository,
        uow: Optional[UnitOfWork] = None,
        retry_policy: RetryPolicy = NO_RETRY,
    ):
        self.account_repo = account_repo
        self.plan_repo = plan_repo
        self.uow = uow
        self.retry_policy = retry_policy

    async def execute(self, account_id: str, now: Optional[datetime] = None) -> Result[PlanStatusDTO]:
        checked = validate_account_id(account_id)
        if checked.is_err():
            return checked

        now = now or datetime.utcnow()

        async def read_state():
            account = await self.account_repo.get_by_account_id(account_id)
            active = await self.plan_repo.get_active_by_account_id(account_id)
            reserved = await self.plan_repo.get_reserved_by_account_id(account_id)
            history = await self.plan_repo.get_history(account_id, limit=HISTORY_LIMIT)
            return account, active, reserved, history

        try:
            account, active, reserved, history = await call_with_retry(
                read_state,
                self.retry_policy,
                on_retry=self.uow.rollback if self.uow else None,
            )
        except Exception as e:
            logger.error(f"Plan status lookup failed for {account_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.GET_PLAN_STATUS_FAILED,
                    message="Failed to read plan status",
                    reason=str(e),
                    details={"account_id": account_id},
                )
            )

        if active is not None and active.is_expired(now):
            active = None

        current_credit = account.current_credit if account else 0
        bonus_credit = account.bonus_credit if account else 0

        return Return.ok(
            PlanStatusDTO(
                account_id=account_id,
                current_credit=current_credit,
                bonus_credit=bonus_credit,
                total_available_credit=current_credit + bonus_credit,
                has_active_plan=active is not None,
                active_plan=PlanInstanceDTO.from_entity(active) if active else None,
                days_remaining=active.days_remaining(now) if active else 0,
                reserved_plans=[PlanInstanceDTO.from_entity(i) for i in reserved],
                history=[PlanInstanceDTO.from_entity(i) for i in history],
                checked_at=now,
            )
        )
