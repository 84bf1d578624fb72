from .base import BaseModel
from .credit_account import CreditAccount, DebitPreference
from .credit_transaction import CreditTransaction, CreditType, TransactionType
from .plan_instance import PlanInstance, PlanInstanceStatus
from .activity_price import ActivityPriceRule, PriceType
from .plan import Plan, PlanStatus

__all__ = [
    "BaseModel",
    "CreditAccount",
    "DebitPreference",
    "CreditTransaction",
    "CreditType",
    "TransactionType",
    "PlanInstance",
    "PlanInstanceStatus",
    "ActivityPriceRule",
    "PriceType",
    "Plan",
    "PlanStatus",
]
