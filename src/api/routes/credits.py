"""Credit API Routes

FastAPI routes for activity pricing, consumption and balance queries.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.retry import RetryPolicy
from src.api.schemas.credit_request import ConsumeRequestSchema
from src.app.services.activity_price_catalog import ActivityPriceCatalog
from src.app.use_cases.credits import (
    ActivityPriceDTO,
    BalanceResponseDTO,
    ConsumeActivity,
    ConsumeActivityCommandDTO,
    ConsumptionReceiptDTO,
    GetBalance,
    ListActivityPrices,
    ListTransactions,
    ListTransactionsResponseDTO,
    PriceQuoteDTO,
    ResolveActivityPrice,
)
from src.adapter.repositories.credit_account_repository import SqlAlchemyCreditAccountRepository
from src.adapter.repositories.credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from src.adapter.repositories.plan_instance_repository import SqlAlchemyPlanInstanceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.credit_account import DebitPreference
from src.domain.credit_transaction import CreditType, TransactionType
from src.depends import get_session, get_config, get_activity_catalog, get_read_retry_policy
from src.api.error import ClientError

router = APIRouter(prefix="/credits", tags=["Credits"])


@router.get("/prices", response_model=List[ActivityPriceDTO])
async def list_activity_prices(catalog: ActivityPriceCatalog = Depends(get_activity_catalog)):
    """List the price of every billable activity."""
    result = await ListActivityPrices(catalog).execute()
    return result.value


@router.get("/prices/{activity_key}", response_model=PriceQuoteDTO)
async def resolve_activity_price(
    activity_key: str,
    quantity: Optional[int] = Query(default=None, description="Unit count for PER_UNIT activities"),
    catalog: ActivityPriceCatalog = Depends(get_activity_catalog),
    config=Depends(get_config),
):
    """
    Quote an activity without charging anything.

    **Returns:**
    - 200: Price quote
    - 404: Unknown activity
    - 400: Invalid quantity
    """
    use_case = ResolveActivityPrice(catalog, config.REJECT_QUANTITY_FOR_FIXED_PRICE)
    result = await use_case.execute(activity_key, quantity)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post(
    "/consume",
    response_model=ConsumptionReceiptDTO,
    status_code=status.HTTP_200_OK,
    responses={
        402: {
            "description": "Insufficient credits",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_CREDIT",
                            "message": "Insufficient credits. Required: 30000, Available: 10000"
                        }
                    }
                }
            }
        },
        403: {
            "description": "No active plan",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "NO_ACTIVE_PLAN",
                            "message": "Account acc_123 has no active plan"
                        }
                    }
                }
            }
        },
    }
)
async def consume_activity(
    request: ConsumeRequestSchema,
    session: AsyncSession = Depends(get_session),
    catalog: ActivityPriceCatalog = Depends(get_activity_catalog),
    config=Depends(get_config),
):
    """
    Charge an account for a billable activity.

    The price comes from the activity catalog. Bonus credit is spent before
    current credit unless configured otherwise.

    **Example request:**
    ```json
    {
      "account_id": "acc_123",
      "activity_key": "PRODUCT_BOOST",
      "target_id": "product_42"
    }
    ```

    **Returns:**
    - 200: Activity consumed, receipt with transactions and remaining balances
    - 400: Invalid request parameters or quantity
    - 402: Insufficient credits
    - 403: No active plan
    - 404: Unknown activity or account
    """
    # Create UnitOfWork and repositories
    uow = SqlAlchemyUnitOfWork(session)
    account_repo = SqlAlchemyCreditAccountRepository(session)
    transaction_repo = SqlAlchemyCreditTransactionRepository(session)
    plan_repo = SqlAlchemyPlanInstanceRepository(session)

    command = ConsumeActivityCommandDTO(
        account_id=request.account_id,
        activity_key=request.activity_key,
        quantity=request.quantity,
        target_id=request.target_id,
        description=request.description,
    )

    use_case = ConsumeActivity(
        uow,
        account_repo,
        transaction_repo,
        plan_repo,
        catalog,
        debit_preference=DebitPreference(config.DEFAULT_DEBIT_PREFERENCE),
        reject_quantity_for_fixed=config.REJECT_QUANTITY_FOR_FIXED_PRICE,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{account_id}/balance", response_model=BalanceResponseDTO)
async def get_balance(
    account_id: str,
    session: AsyncSession = Depends(get_session),
    retry_policy: RetryPolicy = Depends(get_read_retry_policy),
):
    """
    Current and bonus credit of an account.

    **Returns:**
    - 200: Balances
    - 404: Account has no credit account
    """
    use_case = GetBalance(
        SqlAlchemyCreditAccountRepository(session),
        uow=SqlAlchemyUnitOfWork(session),
        retry_policy=retry_policy,
    )
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{account_id}/transactions", response_model=ListTransactionsResponseDTO)
async def list_transactions(
    account_id: str,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    credit_type: Optional[CreditType] = Query(default=None),
    transaction_type: Optional[TransactionType] = Query(default=None),
    session: AsyncSession = Depends(get_session),
    retry_policy: RetryPolicy = Depends(get_read_retry_policy),
):
    """
    Transaction history of an account, newest first.

    **Query parameters:**
    - `limit`: page size (1-100, default 20)
    - `offset`: rows to skip
    - `credit_type`: CURRENT or BONUS
    - `transaction_type`: consume, purchase_grant, admin_add, admin_deduct
    """
    use_case = ListTransactions(
        SqlAlchemyCreditTransactionRepository(session),
        uow=SqlAlchemyUnitOfWork(session),
        retry_policy=retry_policy,
    )
    result = await use_case.execute(
        account_id,
        limit=limit,
        offset=offset,
        credit_type=credit_type,
        transaction_type=transaction_type,
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
