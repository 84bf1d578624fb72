"""DeductCredit Use Case

Admin deduction from an account's balances.
"""

import logging
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.credit_ledger import CreditLedger
from src.app.repositories.credit_account_repository import CreditAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_account import DebitPreference
from src.domain.credit_transaction import TransactionType
from .dtos import DeductCreditCommandDTO, LedgerMutationResponseDTO, TransactionDTO
from .validators import validate_account_id, validate_amount

logger = logging.getLogger(__name__)


class DeductCredit:
    """
    Use Case: Admin credit deduction

    Business Rules:
    1. amount must be a positive integer (INVALID_AMOUNT)
    2. The account must exist (ACCOUNT_NOT_FOUND)
    3. All-or-nothing: insufficient total credit changes nothing (INSUFFICIENT_CREDIT)
    4. Debit order is the command preference, else default_preference (CURRENT_FIRST)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        transaction_repo: CreditTransactionRepository,
        default_preference: DebitPreference = DebitPreference.CURRENT_FIRST,
    ):
        self.uow = uow
        self.ledger = CreditLedger(account_repo, transaction_repo)
        self.default_preference = default_preference

    async def execute(self, command: DeductCreditCommandDTO) -> Result[LedgerMutationResponseDTO]:
        for checked in (validate_account_id(command.account_id), validate_amount(command.amount)):
            if checked.is_err():
                return checked

        preference = command.preference or self.default_preference

        try:
            account = await self.ledger.lock_account(command.account_id)
            debit_result = await self.ledger.debit(
                command.account_id,
                command.amount,
                preference,
                reason=command.description or "ADMIN_DEDUCT",
                transaction_type=TransactionType.ADMIN_DEDUCT,
                description=command.description,
                account=account,
            )
            if debit_result.is_err():
                await self.uow.rollback()
                return debit_result

            await self.uow.commit()

            logger.info(
                f"Admin deducted {command.amount} from {command.account_id} ({preference.value})"
            )

            return Return.ok(
                LedgerMutationResponseDTO(
                    account_id=account.account_id,
                    transactions=[TransactionDTO.from_entity(t) for t in debit_result.value],
                    current_credit=account.current_credit,
                    bonus_credit=account.bonus_credit,
                    total_credit=account.total_credit,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Admin deduction failed for {command.account_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.DEDUCT_CREDIT_FAILED,
                    message="Failed to deduct credit",
                    reason=str(e),
                    details={"account_id": command.account_id, "amount": command.amount},
                )
            )
