"""
List Activity Prices Use Case

Returns every configured activity price rule.
"""
from typing import List
from libs.result import Result, Return
from src.app.services.activity_price_catalog import ActivityPriceCatalog
from .dtos import ActivityPriceDTO


class ListActivityPrices:
    """Use case: View the activity price list"""

    def __init__(self, catalog: ActivityPriceCatalog):
        self.catalog = catalog

    async def execute(self) -> Result[List[ActivityPriceDTO]]:
        return Return.ok(
            [
                ActivityPriceDTO(
                    activity_key=rule.activity_key,
                    price_type=rule.price_type.value,
                    base_price=rule.base_price,
                    unit_name=rule.unit_name,
                    description=rule.description,
                    requires_active_plan=rule.requires_active_plan,
                )
                for rule in self.catalog.all()
            ]
        )
