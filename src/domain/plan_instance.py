"""Plan Instance Domain Entity

One purchase of a Plan by an account. Plan terms are snapshotted at
purchase time so later catalog edits do not change what was bought.
"""

import math
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, text
from src.domain.base import BaseModel, IdType


class PlanInstanceStatus(str, Enum):
    """Plan instance lifecycle states"""
    ACTIVE = "ACTIVE"        # Currently granting validity
    RESERVED = "RESERVED"    # Queued behind the active instance
    EXPIRED = "EXPIRED"      # Validity window elapsed
    EXHAUSTED = "EXHAUSTED"  # Closed early because all credit was spent


class PlanInstance(BaseModel, table=True):
    """
    Plan Instance - A purchased plan

    Domain Rules:
    - At most one is_active instance per account (partial unique index)
    - A reserved instance becomes active only when the active one expires
      or is exhausted
    - expires_at = purchased_at + expiry_days for an instance activated at
      purchase; activate() recomputes it from the activation time, so a
      reserved instance gets its full expiry_days once it becomes active
    - Status transitions: ACTIVE -> EXPIRED/EXHAUSTED, RESERVED -> ACTIVE
    """

    __tablename__ = "plan_instances"
    __table_args__ = (
        Index(
            'uq_plan_instances_active_account',
            'account_id',
            unique=True,
            postgresql_where=text('is_active'),
            sqlite_where=text('is_active = 1'),
        ),
        Index('ix_plan_instances_expires_at', 'expires_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique plan instance identifier (auto-increment)"
    )

    account_id: str = Field(
        index=True,
        description="Owning business account"
    )

    plan_level: int = Field(description="Purchased plan level")

    price: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Price paid (snapshot)"
    )

    credit_amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Current credit granted on activation (snapshot)"
    )

    bonus_credit: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Bonus credit granted on activation (snapshot)"
    )

    expiry_days: int = Field(description="Validity window in days (snapshot)")

    purchased_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Purchase timestamp"
    )

    activated_at: Optional[datetime] = Field(
        default=None,
        description="Activation timestamp (None while reserved)"
    )

    expires_at: datetime = Field(
        description="End of validity window"
    )

    is_active: bool = Field(default=False)
    is_reserved: bool = Field(default=False)

    status: PlanInstanceStatus = Field(
        description="Lifecycle state"
    )

    closed_at: Optional[datetime] = Field(
        default=None,
        description="When the instance expired or was exhausted"
    )

    @property
    def total_credit(self) -> int:
        return self.credit_amount + self.bonus_credit

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def days_remaining(self, now: datetime) -> int:
        """Whole days left, rounded up, never negative"""
        seconds = (self.expires_at - now).total_seconds()
        return max(0, math.ceil(seconds / 86400))

    def activate(self, now: datetime) -> None:
        self.is_active = True
        self.is_reserved = False
        self.status = PlanInstanceStatus.ACTIVE
        self.activated_at = now
        self.expires_at = now + timedelta(days=self.expiry_days)

    def close(self, status: PlanInstanceStatus, now: datetime) -> None:
        self.is_active = False
        self.status = status
        self.closed_at = now
