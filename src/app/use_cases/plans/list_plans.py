"""
List Plans Use Case

Returns the purchasable plans ordered by level.
"""
from typing import List
from libs.result import Result, Return
from src.app.services.plan_catalog import PlanCatalog
from .dtos import PlanDTO


class ListPlans:
    """Use case: View purchasable plans (ACTIVE only)"""

    def __init__(self, plan_catalog: PlanCatalog):
        self.plan_catalog = plan_catalog

    async def execute(self) -> Result[List[PlanDTO]]:
        return Return.ok([PlanDTO.from_plan(plan) for plan in self.plan_catalog.active_plans()])
