"""Data Transfer Objects for Plan Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.plan import Plan
from src.domain.plan_instance import PlanInstance


class PlanDTO(BaseModel):
    """Purchasable plan as shown to callers"""

    level: int
    name: str
    price: int
    credit_amount: int
    bonus_credit: int
    total_credit: int
    expiry_days: int
    status: str
    is_popular: bool
    description: Optional[str] = None
    benefits: List[str] = Field(default_factory=list)

    @classmethod
    def from_plan(cls, plan: Plan) -> "PlanDTO":
        return cls(
            level=plan.level,
            name=plan.name,
            price=plan.price,
            credit_amount=plan.credit_amount,
            bonus_credit=plan.bonus_credit,
            total_credit=plan.total_credit,
            expiry_days=plan.expiry_days,
            status=plan.status.value,
            is_popular=plan.is_popular,
            description=plan.description,
            benefits=list(plan.benefits),
        )


class PurchasePlanCommandDTO(BaseModel):
    """Command DTO for purchasing a plan"""

    account_id: str = Field(..., description="Business account identifier")
    plan_level: int = Field(..., description="Plan level to purchase")

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acc_123",
                "plan_level": 1
            }
        }


class PlanInstanceDTO(BaseModel):
    """A purchased plan"""

    id: int
    account_id: str
    plan_level: int
    price: int
    credit_amount: int
    bonus_credit: int
    total_credit: int
    status: str
    is_active: bool
    is_reserved: bool
    purchased_at: datetime
    activated_at: Optional[datetime] = None
    expires_at: datetime
    closed_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, instance: PlanInstance) -> "PlanInstanceDTO":
        return cls(
            id=instance.id,
            account_id=instance.account_id,
            plan_level=instance.plan_level,
            price=instance.price,
            credit_amount=instance.credit_amount,
            bonus_credit=instance.bonus_credit,
            total_credit=instance.total_credit,
            status=instance.status.value,
            is_active=instance.is_active,
            is_reserved=instance.is_reserved,
            purchased_at=instance.purchased_at,
            activated_at=instance.activated_at,
            expires_at=instance.expires_at,
            closed_at=instance.closed_at,
        )


class PlanStatusDTO(BaseModel):
    """Balances and plan state of one account"""

    account_id: str
    current_credit: int = Field(..., description="Paid credit balance")
    bonus_credit: int = Field(..., description="Promotional credit balance")
    total_available_credit: int = Field(..., description="current_credit + bonus_credit")
    has_active_plan: bool
    active_plan: Optional[PlanInstanceDTO] = Field(
        default=None,
        description="Active, unexpired plan instance"
    )
    days_remaining: int = Field(..., description="ceil(days until expiry), never negative")
    reserved_plans: List[PlanInstanceDTO] = Field(default_factory=list)
    history: List[PlanInstanceDTO] = Field(default_factory=list, description="Last 10 purchases")
    checked_at: datetime


class ExpirePlansResultDTO(BaseModel):
    """Summary of one expiry sweep"""

    expired_count: int = Field(..., description="Active instances closed as EXPIRED")
    activated_count: int = Field(..., description="Reserved instances promoted")
    failed_count: int = Field(..., description="Accounts whose update was rolled back")
    run_at: datetime
