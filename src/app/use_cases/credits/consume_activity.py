"""ConsumeActivity Use Case

Charges an account for a billable activity. The plan check, the debit and
any plan promotion run under the account row lock and commit together.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.activity_price_catalog import ActivityPriceCatalog
from src.app.services.credit_ledger import CreditLedger
from src.app.services.plan_activation import PlanActivator
from src.app.repositories.credit_account_repository import CreditAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.app.repositories.plan_instance_repository import PlanInstanceRepository
from src.domain.credit_account import DebitPreference
from src.domain.credit_transaction import TransactionType
from src.domain.plan_instance import PlanInstanceStatus
from .dtos import ConsumeActivityCommandDTO, ConsumptionReceiptDTO, TransactionDTO
from .resolve_activity_price import ResolveActivityPrice
from .validators import validate_account_id

logger = logging.getLogger(__name__)


class ConsumeActivity:
    """
    Use Case: Consume a billable activity

    Business Rules:
    1. Price comes from the activity catalog (UNKNOWN_ACTIVITY_KIND / INVALID_QUANTITY)
    2. Rules with requires_active_plan need an active, unexpired plan (NO_ACTIVE_PLAN)
    3. Debit order follows debit_preference (BONUS_FIRST by default)
    4. Insufficient total credit fails with no state change (INSUFFICIENT_CREDIT)
    5. If the debit empties both balances, the active plan is closed as
       EXHAUSTED and the oldest reserved plan is activated
    6. Zero-priced activities record no transactions

    Flow:
    1. Validate input and resolve the price
    2. Lock the credit account (SELECT FOR UPDATE)
    3. Check the active plan when the rule requires it
    4. Debit through the ledger
    5. Promote a reserved plan on exhaustion
    6. Commit and return the receipt
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        transaction_repo: CreditTransactionRepository,
        plan_repo: PlanInstanceRepository,
        catalog: ActivityPriceCatalog,
        debit_preference: DebitPreference = DebitPreference.BONUS_FIRST,
        reject_quantity_for_fixed: bool = False,
    ):
        self.uow = uow
        self.plan_repo = plan_repo
        self.catalog = catalog
        self.debit_preference = debit_preference
        self.ledger = CreditLedger(account_repo, transaction_repo)
        self.activator = PlanActivator(self.ledger, plan_repo)
        self.price_resolver = ResolveActivityPrice(catalog, reject_quantity_for_fixed)

    async def execute(self, command: ConsumeActivityCommandDTO) -> Result[ConsumptionReceiptDTO]:
        """
        Execute activity consumption

        Args:
            command: ConsumeActivityCommandDTO with account_id, activity_key, optional quantity

        Returns:
            Result[ConsumptionReceiptDTO]: Receipt with transactions and remaining balances
        """
        # Step 1: Validate input and resolve price (no I/O)
        checked = validate_account_id(command.account_id)
        if checked.is_err():
            return checked

        quote_result = self.price_resolver.resolve(command.activity_key, command.quantity)
        if quote_result.is_err():
            return quote_result
        quote = quote_result.value
        rule = self.catalog.get(command.activity_key)

        audit = {
            "account_id": command.account_id,
            "activity_key": command.activity_key,
            "amount": quote.total_price,
        }

        try:
            now = datetime.utcnow()

            # Step 2: Serialize on the account row
            account = await self.ledger.lock_account(command.account_id)

            # Step 3: Plan gating
            active_plan = await self.plan_repo.get_active_by_account_id(command.account_id)
            has_active_plan = active_plan is not None and not active_plan.is_expired(now)
            if rule.requires_active_plan and not has_active_plan:
                await self.uow.rollback()
                logger.warning(
                    f"Consumption of {command.activity_key} refused for {command.account_id}: no active plan"
                )
                return Return.err(
                    Error(
                        code=ErrorCode.NO_ACTIVE_PLAN,
                        message=f"Account {command.account_id} has no active plan",
                        details=audit,
                    )
                )

            # Step 4: Debit
            transactions = []
            if quote.total_price > 0:
                debit_result = await self.ledger.debit(
                    command.account_id,
                    quote.total_price,
                    self.debit_preference,
                    reason=command.activity_key,
                    transaction_type=TransactionType.CONSUME,
                    reference_type="activity" if command.target_id else None,
                    reference_id=command.target_id,
                    description=command.description,
                    account=account,
                )
                if debit_result.is_err():
                    await self.uow.rollback()
                    error = debit_result.error
                    return Return.err(
                        Error(
                            code=error.code,
                            message=error.message,
                            reason=error.reason,
                            details={**audit, **error.details},
                        )
                    )
                transactions = debit_result.value

            # Step 5: Exhaustion promotion
            if transactions and has_active_plan and account.total_credit == 0:
                await self.activator.close_and_promote(active_plan, PlanInstanceStatus.EXHAUSTED, now)

            # Step 6: Commit
            await self.uow.commit()

            logger.info(
                f"Consumed {command.activity_key} x{quote.quantity} for {command.account_id}: "
                f"charged {quote.total_price}"
            )

            return Return.ok(
                ConsumptionReceiptDTO(
                    account_id=command.account_id,
                    activity_key=quote.activity_key,
                    price_type=quote.price_type,
                    quantity=quote.quantity,
                    unit_price=quote.unit_price,
                    total_price=quote.total_price,
                    transactions=[TransactionDTO.from_entity(t) for t in transactions],
                    remaining_current=account.current_credit if account else 0,
                    remaining_bonus=account.bonus_credit if account else 0,
                    target_id=command.target_id,
                    description=command.description,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Consumption of {command.activity_key} failed for {command.account_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.CONSUME_ACTIVITY_FAILED,
                    message="Failed to consume activity",
                    reason=str(e),
                    details=audit,
                )
            )
