"""Plan purchase and lifecycle use cases"""
from .list_plans import ListPlans
from .purchase_plan import PurchasePlan
from .get_plan_status import GetPlanStatus
from .expire_due_plans import ExpireDuePlans
from .dtos import (
    PlanDTO,
    PurchasePlanCommandDTO,
    PlanInstanceDTO,
    PlanStatusDTO,
    ExpirePlansResultDTO,
)

__all__ = [
    "ListPlans",
    "PurchasePlan",
    "GetPlanStatus",
    "ExpireDuePlans",
    "PlanDTO",
    "PurchasePlanCommandDTO",
    "PlanInstanceDTO",
    "PlanStatusDTO",
    "ExpirePlansResultDTO",
]
