"""Activity Price Rule

Static pricing for billable platform activities. Rules are loaded once
from configuration and never mutated at runtime.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class PriceType(str, Enum):
    """How an activity is priced"""
    FIXED = "FIXED"        # One flat price per consumption
    PER_UNIT = "PER_UNIT"  # base_price times quantity


class ActivityPriceRule(BaseModel):
    """
    Activity Price Rule - Price of one activity kind

    Domain Rules:
    - activity_key is unique within a catalog
    - base_price is a non-negative integer in currency minor units
    - unit_name is present iff price_type is PER_UNIT
    - requires_active_plan gates consumption on an active plan instance
    """

    model_config = ConfigDict(frozen=True)

    activity_key: str = Field(..., min_length=1, description="Activity identifier")
    price_type: PriceType = Field(..., description="FIXED or PER_UNIT")
    base_price: int = Field(..., ge=0, description="Price in currency minor units")
    unit_name: Optional[str] = Field(default=None, description="Unit label for PER_UNIT rules")
    description: Optional[str] = Field(default=None, description="Human readable description")
    requires_active_plan: bool = Field(
        default=True,
        description="Whether consuming this activity needs an active plan"
    )

    @model_validator(mode="after")
    def check_unit_name(self) -> "ActivityPriceRule":
        if self.price_type == PriceType.PER_UNIT and not self.unit_name:
            raise ValueError(f"PER_UNIT activity {self.activity_key} needs a unit_name")
        if self.price_type == PriceType.FIXED and self.unit_name:
            raise ValueError(f"FIXED activity {self.activity_key} cannot have a unit_name")
        return self
