"""Data Transfer Objects for Credit Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.credit_account import DebitPreference
from src.domain.credit_transaction import CreditTransaction, CreditType


class PriceQuoteDTO(BaseModel):
    """Resolved price of one activity consumption"""

    activity_key: str = Field(..., description="Activity identifier")
    price_type: str = Field(..., description="FIXED or PER_UNIT")
    quantity: int = Field(..., description="Quantity the price was computed for")
    unit_price: int = Field(..., description="Base price of one unit")
    total_price: int = Field(..., description="Amount that will be debited")
    unit_name: Optional[str] = Field(default=None, description="Unit label for PER_UNIT rules")

    class Config:
        json_schema_extra = {
            "example": {
                "activity_key": "SEND_BROADCAST",
                "price_type": "PER_UNIT",
                "quantity": 3,
                "unit_price": 5000,
                "total_price": 15000,
                "unit_name": "message"
            }
        }


class ActivityPriceDTO(BaseModel):
    """One entry of the activity price list"""

    activity_key: str
    price_type: str
    base_price: int
    unit_name: Optional[str] = None
    description: Optional[str] = None
    requires_active_plan: bool = True


class TransactionDTO(BaseModel):
    """Single credit transaction in responses"""

    id: int = Field(..., description="Transaction ID")
    transaction_type: str = Field(..., description="consume, purchase_grant, admin_add, admin_deduct")
    credit_type: str = Field(..., description="CURRENT or BONUS")
    amount: int = Field(..., description="Signed amount")
    balance_after: int = Field(..., description="Affected balance after this transaction")
    reason: str = Field(..., description="Activity key or admin note")
    reference_type: Optional[str] = Field(default=None)
    reference_id: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)
    created_at: datetime = Field(..., description="Transaction timestamp")

    @classmethod
    def from_entity(cls, transaction: CreditTransaction) -> "TransactionDTO":
        return cls(
            id=transaction.id,
            transaction_type=transaction.transaction_type.value,
            credit_type=transaction.credit_type.value,
            amount=transaction.amount,
            balance_after=transaction.balance_after,
            reason=transaction.reason,
            reference_type=transaction.reference_type,
            reference_id=transaction.reference_id,
            description=transaction.description,
            created_at=transaction.created_at,
        )


class ConsumeActivityCommandDTO(BaseModel):
    """
    Command DTO for consuming an activity

    Values are checked by the use case validators, not by field constraints.
    quantity is None when the caller did not supply one.
    """

    account_id: str = Field(..., description="Business account identifier")
    activity_key: str = Field(..., description="Activity to consume")
    quantity: Optional[int] = Field(default=None, description="Units for PER_UNIT activities")
    target_id: Optional[str] = Field(default=None, description="Entity the activity applies to")
    description: Optional[str] = Field(default=None, description="Free-form note")

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acc_123",
                "activity_key": "PRODUCT_BOOST",
                "target_id": "product_42",
                "description": "Boost spring catalog"
            }
        }


class ConsumptionReceiptDTO(BaseModel):
    """Result of a successful activity consumption"""

    account_id: str
    activity_key: str
    price_type: str
    quantity: int
    unit_price: int
    total_price: int
    transactions: List[TransactionDTO] = Field(default_factory=list)
    remaining_current: int = Field(..., description="current_credit after the debit")
    remaining_bonus: int = Field(..., description="bonus_credit after the debit")
    target_id: Optional[str] = None
    description: Optional[str] = None


class AddCreditCommandDTO(BaseModel):
    """Command DTO for an admin credit grant"""

    account_id: str = Field(..., description="Business account identifier")
    amount: int = Field(..., description="Amount to add (must be > 0)")
    credit_type: CreditType = Field(default=CreditType.CURRENT, description="Balance to increase")
    description: Optional[str] = Field(default=None, description="Admin note")


class DeductCreditCommandDTO(BaseModel):
    """Command DTO for an admin deduction"""

    account_id: str = Field(..., description="Business account identifier")
    amount: int = Field(..., description="Amount to deduct (must be > 0)")
    description: Optional[str] = Field(default=None, description="Admin note")
    preference: Optional[DebitPreference] = Field(
        default=None,
        description="Debit order; defaults to the configured admin preference"
    )


class LedgerMutationResponseDTO(BaseModel):
    """Balances and transactions after an admin add/deduct"""

    account_id: str
    transactions: List[TransactionDTO]
    current_credit: int
    bonus_credit: int
    total_credit: int


class BalanceResponseDTO(BaseModel):
    """Current balances of one account"""

    account_id: str = Field(..., description="Business account identifier")
    current_credit: int = Field(..., description="Paid credit balance")
    bonus_credit: int = Field(..., description="Promotional credit balance")
    total_credit: int = Field(..., description="current_credit + bonus_credit")
    last_updated: datetime = Field(..., description="Last balance update timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acc_123",
                "current_credit": 0,
                "bonus_credit": 190000,
                "total_credit": 190000,
                "last_updated": "2024-01-01T00:00:00Z"
            }
        }


class ListTransactionsResponseDTO(BaseModel):
    """Paginated transaction history"""

    transactions: List[TransactionDTO]
    total: int = Field(..., description="Total matching transactions")
    limit: int
    offset: int


class LedgerDiscrepancyDTO(BaseModel):
    """Cached balance that does not match its transaction sum"""

    account_id: str
    credit_account_id: int
    credit_type: str
    cached_balance: int
    calculated_balance: int
    discrepancy: int = Field(..., description="cached_balance - calculated_balance")


class ReconciliationResultDTO(BaseModel):
    """Result of a reconciliation run"""

    total_accounts_checked: int
    discrepancies_found: int
    discrepancies: List[LedgerDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
