"""Admin API Routes

Manual credit adjustments plus HTTP triggers for the expiry sweep and
ledger reconciliation. No authentication is applied at this layer.
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.credit_request import AddCreditRequestSchema, DeductCreditRequestSchema
from src.app.use_cases.credits import (
    AddCredit,
    AddCreditCommandDTO,
    DeductCredit,
    DeductCreditCommandDTO,
    LedgerMutationResponseDTO,
    ReconcileLedger,
    ReconciliationResultDTO,
)
from src.app.use_cases.plans import ExpireDuePlans, ExpirePlansResultDTO
from src.adapter.repositories.credit_account_repository import SqlAlchemyCreditAccountRepository
from src.adapter.repositories.credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from src.adapter.repositories.plan_instance_repository import SqlAlchemyPlanInstanceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.credit_account import DebitPreference
from src.depends import get_session, get_config
from src.api.error import ClientError

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/credits/add", response_model=LedgerMutationResponseDTO)
async def add_credit(
    request: AddCreditRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Grant current or bonus credit; creates the credit account on first grant."""
    use_case = AddCredit(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
    )
    result = await use_case.execute(
        AddCreditCommandDTO(
            account_id=request.account_id,
            amount=request.amount,
            credit_type=request.credit_type,
            description=request.description,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/credits/deduct", response_model=LedgerMutationResponseDTO)
async def deduct_credit(
    request: DeductCreditRequestSchema,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """Deduct credit all-or-nothing; current credit first unless a preference is given."""
    use_case = DeductCredit(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        default_preference=DebitPreference(config.ADMIN_DEDUCT_PREFERENCE),
    )
    result = await use_case.execute(
        DeductCreditCommandDTO(
            account_id=request.account_id,
            amount=request.amount,
            description=request.description,
            preference=request.preference,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/plans/expire", response_model=ExpirePlansResultDTO)
async def expire_due_plans(
    now: Optional[datetime] = Query(default=None, description="Reference instant (defaults to now, UTC)"),
    session: AsyncSession = Depends(get_session),
):
    """Run the plan expiry sweep once."""
    use_case = ExpireDuePlans(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        SqlAlchemyPlanInstanceRepository(session),
    )
    result = await use_case.execute(now or datetime.utcnow())

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/ledger/reconcile", response_model=ReconciliationResultDTO)
async def reconcile_ledger(session: AsyncSession = Depends(get_session)):
    """Compare cached balances with transaction sums (read-only)."""
    use_case = ReconcileLedger(
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
    )
    result = await use_case.execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value
