"""Plan Catalog

Immutable in-memory lookup of purchasable plans keyed by level.
"""

from types import MappingProxyType
from typing import Iterable, List, Optional
from src.domain.plan import Plan
from src.app.services.activity_price_catalog import CatalogConfigError


class PlanCatalog:
    """Read-only mapping from plan level to Plan"""

    def __init__(self, plans: Iterable[Plan]):
        by_level = {}
        for plan in plans:
            if plan.level in by_level:
                raise CatalogConfigError(f"Duplicate plan level: {plan.level}")
            by_level[plan.level] = plan
        self._plans = MappingProxyType(dict(sorted(by_level.items())))

    def get(self, level: int) -> Optional[Plan]:
        return self._plans.get(level)

    def get_purchasable(self, level: int) -> Optional[Plan]:
        """Plan for the level if it exists and is ACTIVE"""
        plan = self._plans.get(level)
        if plan is None or not plan.is_purchasable:
            return None
        return plan

    def active_plans(self) -> List[Plan]:
        """ACTIVE plans ordered by level"""
        return [plan for plan in self._plans.values() if plan.is_purchasable]

    def all(self) -> List[Plan]:
        return list(self._plans.values())

    def __len__(self) -> int:
        return len(self._plans)
