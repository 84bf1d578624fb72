"""Plan API Routes

FastAPI routes for plan listing, purchase and status.
"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.retry import RetryPolicy
from src.api.schemas.plan_request import PurchasePlanRequestSchema
from src.app.services.plan_catalog import PlanCatalog
from src.app.use_cases.plans import (
    GetPlanStatus,
    ListPlans,
    PlanDTO,
    PlanInstanceDTO,
    PlanStatusDTO,
    PurchasePlan,
    PurchasePlanCommandDTO,
)
from src.adapter.repositories.credit_account_repository import SqlAlchemyCreditAccountRepository
from src.adapter.repositories.credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from src.adapter.repositories.plan_instance_repository import SqlAlchemyPlanInstanceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session, get_plan_catalog, get_read_retry_policy
from src.api.error import ClientError

router = APIRouter(prefix="/plans", tags=["Plans"])


@router.get("", response_model=List[PlanDTO])
async def list_plans(plan_catalog: PlanCatalog = Depends(get_plan_catalog)):
    """Purchasable plans ordered by level."""
    result = await ListPlans(plan_catalog).execute()
    return result.value


@router.post("/purchase", response_model=PlanInstanceDTO, status_code=status.HTTP_201_CREATED)
async def purchase_plan(
    request: PurchasePlanRequestSchema,
    session: AsyncSession = Depends(get_session),
    plan_catalog: PlanCatalog = Depends(get_plan_catalog),
):
    """
    Purchase a plan.

    Activates immediately and grants its credit when the account has no
    running plan; otherwise the purchase is queued as reserved.

    **Returns:**
    - 201: Plan instance (active or reserved)
    - 404: Unknown or inactive plan level
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = PurchasePlan(
        uow,
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        SqlAlchemyPlanInstanceRepository(session),
        plan_catalog,
    )
    result = await use_case.execute(
        PurchasePlanCommandDTO(account_id=request.account_id, plan_level=request.plan_level)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{account_id}/status", response_model=PlanStatusDTO)
async def get_plan_status(
    account_id: str,
    session: AsyncSession = Depends(get_session),
    retry_policy: RetryPolicy = Depends(get_read_retry_policy),
):
    """Balances, active plan with days remaining, reserved plans and recent history."""
    use_case = GetPlanStatus(
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyPlanInstanceRepository(session),
        uow=SqlAlchemyUnitOfWork(session),
        retry_policy=retry_policy,
    )
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
