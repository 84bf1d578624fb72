"""Credit Account Domain Entity

Holds the current and bonus balances of one business account.
Balances are a cache of the transaction log and never go negative.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, BigInteger
from src.domain.base import BaseModel, IdType
from src.domain.credit_transaction import CreditType


class DebitPreference(str, Enum):
    """Which balance a debit draws from first"""
    BONUS_FIRST = "BONUS_FIRST"
    CURRENT_FIRST = "CURRENT_FIRST"


class CreditAccount(BaseModel, table=True):
    """
    Credit Account - Per-account balance pair

    Domain Rules:
    - One account per account_id (unique)
    - current_credit and bonus_credit are both >= 0
    - Balances change only through the credit ledger, which appends a
      CreditTransaction for every change
    - Never hard-deleted
    """

    __tablename__ = "credit_accounts"
    __table_args__ = (
        CheckConstraint('current_credit >= 0', name='current_credit_non_negative'),
        CheckConstraint('bonus_credit >= 0', name='bonus_credit_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique account row identifier (auto-increment)"
    )

    account_id: str = Field(
        index=True,
        unique=True,
        description="Business account identifier (unique)"
    )

    current_credit: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Paid credit balance (>= 0)"
    )

    bonus_credit: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Promotional credit balance (>= 0)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last balance update timestamp"
    )

    @property
    def total_credit(self) -> int:
        return self.current_credit + self.bonus_credit

    def balance_of(self, credit_type: CreditType) -> int:
        if credit_type == CreditType.BONUS:
            return self.bonus_credit
        return self.current_credit

    def apply(self, credit_type: CreditType, delta: int) -> int:
        """
        Add a signed delta to one balance

        Returns:
            The new balance

        Raises:
            ValueError: If the balance would become negative
        """
        new_balance = self.balance_of(credit_type) + delta
        if new_balance < 0:
            raise ValueError(
                f"{credit_type.value} balance of {self.account_id} would become {new_balance}"
            )
        if credit_type == CreditType.BONUS:
            self.bonus_credit = new_balance
        else:
            self.current_credit = new_balance
        self.updated_at = datetime.utcnow()
        return new_balance

    def plan_debit(self, amount: int, preference: DebitPreference) -> List[Tuple[CreditType, int]]:
        """
        Split a debit across the two balances

        Draws from the preferred balance up to what it holds, the remainder
        from the other one. Balances with a zero share are omitted.

        Raises:
            ValueError: If total_credit < amount
        """
        if amount > self.total_credit:
            raise ValueError(f"Cannot debit {amount} from total balance {self.total_credit}")

        if preference == DebitPreference.BONUS_FIRST:
            order = (CreditType.BONUS, CreditType.CURRENT)
        else:
            order = (CreditType.CURRENT, CreditType.BONUS)

        parts = []
        remaining = amount
        for credit_type in order:
            share = min(remaining, self.balance_of(credit_type))
            if share > 0:
                parts.append((credit_type, share))
                remaining -= share
        return parts

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "account_id": "acc_123",
                "current_credit": 0,
                "bonus_credit": 220000,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }
