"""Credit Transaction Domain Entity

Immutable append-only audit trail of all balance mutations.
Summing an account's transactions per credit type reconstructs its balances.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, String
from src.domain.base import BaseModel, IdType


class CreditType(str, Enum):
    """Balance a transaction applies to"""
    CURRENT = "CURRENT"  # Paid, cash-equivalent credit
    BONUS = "BONUS"      # Promotional credit granted on top of a purchase


class TransactionType(str, Enum):
    """Credit transaction types"""
    CONSUME = "consume"                # Activity consumption
    PURCHASE_GRANT = "purchase_grant"  # Credit granted by plan activation
    ADMIN_ADD = "admin_add"            # Manual admin credit grant
    ADMIN_DEDUCT = "admin_deduct"      # Manual admin deduction


class CreditTransaction(BaseModel, table=True):
    """
    Credit Transaction - Immutable record of one balance change

    Domain Rules:
    - Transactions are immutable (append-only)
    - amount is signed: positive for credits, negative for debits
    - Exactly one transaction per affected balance (a debit spanning both
      balances produces two rows)
    - balance_after is the affected balance right after this row was applied
    """

    __tablename__ = "credit_transactions"
    __table_args__ = (
        Index('ix_credit_transactions_account_created', 'account_id', 'created_at'),
        Index('ix_credit_transactions_reference', 'reference_type', 'reference_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique transaction identifier (auto-increment)"
    )

    account_id: str = Field(
        index=True,
        description="Owning business account"
    )

    credit_account_id: int = Field(
        sa_column=Column(IdType, ForeignKey("credit_accounts.id"), nullable=False),
        description="Foreign key to CreditAccount"
    )

    transaction_type: TransactionType = Field(
        description="Type of transaction (consume, purchase_grant, admin_add, admin_deduct)"
    )

    credit_type: CreditType = Field(
        description="Balance affected (CURRENT or BONUS)"
    )

    amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Signed amount in currency minor units"
    )

    balance_after: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Affected balance after this transaction"
    )

    reason: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Activity key or admin note"
    )

    reference_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Type of reference (e.g., 'activity', 'plan_instance')"
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="ID of referenced entity (e.g., boosted product id)"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Free-form note"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Transaction timestamp (immutable)"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "account_id": "acc_123",
                "credit_account_id": 1,
                "transaction_type": "consume",
                "credit_type": "BONUS",
                "amount": -30000,
                "balance_after": 190000,
                "reason": "PRODUCT_BOOST",
                "reference_type": "activity",
                "reference_id": "product_42",
                "created_at": "2024-01-01T00:00:00Z"
            }
        }
