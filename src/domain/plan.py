"""Plan Catalog Entry

A purchasable level granting current and bonus credit for a validity window.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class PlanStatus(str, Enum):
    """Whether a plan can be purchased"""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Plan(BaseModel):
    """
    Plan - Static reference data for one purchasable level

    Domain Rules:
    - level is unique within a catalog
    - total_credit = credit_amount + bonus_credit
    - Only ACTIVE plans can be purchased
    """

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1, description="Plan level (unique)")
    name: str = Field(..., min_length=1, description="Display name")
    price: int = Field(..., ge=0, description="Purchase price in currency minor units")
    credit_amount: int = Field(..., ge=0, description="Current credit granted on activation")
    bonus_credit: int = Field(..., ge=0, description="Bonus credit granted on activation")
    total_credit: int = Field(..., ge=0, description="credit_amount + bonus_credit")
    expiry_days: int = Field(..., ge=1, description="Validity window in days")
    status: PlanStatus = Field(default=PlanStatus.ACTIVE)
    is_popular: bool = Field(default=False)
    description: Optional[str] = Field(default=None)
    benefits: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_total_credit(self) -> "Plan":
        if self.total_credit != self.credit_amount + self.bonus_credit:
            raise ValueError(
                f"Plan level {self.level}: total_credit {self.total_credit} != "
                f"credit_amount {self.credit_amount} + bonus_credit {self.bonus_credit}"
            )
        return self

    @property
    def is_purchasable(self) -> bool:
        return self.status == PlanStatus.ACTIVE
