from .credit_account_repository import CreditAccountRepository
from .credit_transaction_repository import CreditTransactionRepository
from .plan_instance_repository import PlanInstanceRepository

__all__ = [
    "CreditAccountRepository",
    "CreditTransactionRepository",
    "PlanInstanceRepository",
]
