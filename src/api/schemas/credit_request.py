"""Request schemas for Credit API

Pydantic models for validating incoming HTTP requests.
"""

from typing import Optional
from pydantic import BaseModel, Field
from src.domain.credit_account import DebitPreference
from src.domain.credit_transaction import CreditType


class ConsumeRequestSchema(BaseModel):
    """
    Request schema for consuming an activity

    Used for POST /credits/consume endpoint.
    """

    account_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Business account identifier (required, non-empty)"
    )

    activity_key: str = Field(
        ...,
        min_length=1,
        description="Activity to consume, e.g. PRODUCT_BOOST"
    )

    quantity: Optional[int] = Field(
        default=None,
        ge=1,
        description="Unit count for PER_UNIT activities"
    )

    target_id: Optional[str] = Field(
        default=None,
        description="Entity the activity applies to (e.g. product id)"
    )

    description: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Free-form note"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acc_123",
                "activity_key": "SEND_BROADCAST",
                "quantity": 3,
                "target_id": "campaign_7"
            }
        }


class AddCreditRequestSchema(BaseModel):
    """Request schema for POST /admin/credits/add"""

    account_id: str = Field(..., min_length=1, max_length=255)
    amount: int = Field(..., gt=0, description="Amount to add (must be > 0)")
    credit_type: CreditType = Field(default=CreditType.CURRENT, description="CURRENT or BONUS")
    description: Optional[str] = Field(default=None, max_length=500)


class DeductCreditRequestSchema(BaseModel):
    """Request schema for POST /admin/credits/deduct"""

    account_id: str = Field(..., min_length=1, max_length=255)
    amount: int = Field(..., gt=0, description="Amount to deduct (must be > 0)")
    description: Optional[str] = Field(default=None, max_length=500)
    preference: Optional[DebitPreference] = Field(
        default=None,
        description="BONUS_FIRST or CURRENT_FIRST (defaults to configured admin preference)"
    )
