"""Activity Price Catalog

Immutable in-memory lookup of activity price rules, built once at startup.
"""

from types import MappingProxyType
from typing import Iterable, List, Optional
from src.domain.activity_price import ActivityPriceRule


class CatalogConfigError(ValueError):
    """Raised when catalog configuration is invalid (duplicate keys, bad totals, ...)"""
    pass


class ActivityPriceCatalog:
    """
    Read-only mapping from activity key to its price rule

    Keys are unique; a duplicate key fails construction.
    """

    def __init__(self, rules: Iterable[ActivityPriceRule]):
        by_key = {}
        for rule in rules:
            if rule.activity_key in by_key:
                raise CatalogConfigError(f"Duplicate activity key: {rule.activity_key}")
            by_key[rule.activity_key] = rule
        self._rules = MappingProxyType(by_key)

    def get(self, activity_key: str) -> Optional[ActivityPriceRule]:
        return self._rules.get(activity_key)

    def all(self) -> List[ActivityPriceRule]:
        return list(self._rules.values())

    def __contains__(self, activity_key: str) -> bool:
        return activity_key in self._rules

    def __len__(self) -> int:
        return len(self._rules)
