"""AddCredit Use Case

Admin grant of current or bonus credit to an account.
"""

import logging
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.credit_ledger import CreditLedger
from src.app.repositories.credit_account_repository import CreditAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_transaction import TransactionType
from .dtos import AddCreditCommandDTO, LedgerMutationResponseDTO, TransactionDTO
from .validators import validate_account_id, validate_amount

logger = logging.getLogger(__name__)


class AddCredit:
    """
    Use Case: Admin credit grant

    Business Rules:
    1. amount must be a positive integer (INVALID_AMOUNT)
    2. The credit account is created on first grant
    3. One admin_add transaction is appended

    Flow:
    1. Validate account_id and amount
    2. Lock or create the account and credit the ledger
    3. Commit and return the new balances
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.uow = uow
        self.ledger = CreditLedger(account_repo, transaction_repo)

    async def execute(self, command: AddCreditCommandDTO) -> Result[LedgerMutationResponseDTO]:
        for checked in (validate_account_id(command.account_id), validate_amount(command.amount)):
            if checked.is_err():
                return checked

        try:
            # Step 1: Lock or create the account, then credit the named balance
            account = await self.ledger.get_or_create_account(command.account_id)
            credit_result = await self.ledger.credit(
                command.account_id,
                command.amount,
                command.credit_type,
                reason=command.description or "ADMIN_ADD",
                transaction_type=TransactionType.ADMIN_ADD,
                description=command.description,
                account=account,
            )
            if credit_result.is_err():
                await self.uow.rollback()
                return credit_result

            # Step 2: Commit
            await self.uow.commit()

            logger.info(
                f"Admin added {command.amount} {command.credit_type.value} credit to {command.account_id}"
            )

            return Return.ok(
                LedgerMutationResponseDTO(
                    account_id=account.account_id,
                    transactions=[TransactionDTO.from_entity(credit_result.value)],
                    current_credit=account.current_credit,
                    bonus_credit=account.bonus_credit,
                    total_credit=account.total_credit,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Admin credit grant failed for {command.account_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.ADD_CREDIT_FAILED,
                    message="Failed to add credit",
                    reason=str(e),
                    details={"account_id": command.account_id, "amount": command.amount},
                )
            )
