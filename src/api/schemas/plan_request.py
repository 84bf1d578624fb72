"""Request schemas for Plan API"""

from pydantic import BaseModel, Field


class PurchasePlanRequestSchema(BaseModel):
    """Request schema for POST /plans/purchase"""

    account_id: str = Field(..., min_length=1, max_length=255)
    plan_level: int = Field(..., ge=1, description="Plan level to purchase")

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acc_123",
                "plan_level": 3
            }
        }
