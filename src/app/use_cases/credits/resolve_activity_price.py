"""
Resolve Activity Price Use Case

Quotes the credit cost of an activity without touching any balance.
"""
from typing import Optional
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.services.activity_price_catalog import ActivityPriceCatalog
from src.domain.activity_price import PriceType
from .dtos import PriceQuoteDTO
from .validators import validate_quantity


class ResolveActivityPrice:
    """
    Use case: Resolve the price of an activity

    Business Rules:
    1. Unknown activity keys fail with UNKNOWN_ACTIVITY_KIND
    2. FIXED: total = base_price whatever the quantity; an explicit
       quantity > 1 fails with INVALID_QUANTITY when reject_quantity_for_fixed is set
    3. PER_UNIT: total = base_price * quantity (quantity defaults to 1)
    4. An explicit quantity < 1 fails with INVALID_QUANTITY
    """

    def __init__(self, catalog: ActivityPriceCatalog, reject_quantity_for_fixed: bool = False):
        """
        Args:
            catalog: Loaded activity price catalog
            reject_quantity_for_fixed: Fail instead of ignoring quantity > 1 on FIXED rules
        """
        self.catalog = catalog
        self.reject_quantity_for_fixed = reject_quantity_for_fixed

    def resolve(self, activity_key: str, quantity: Optional[int] = None) -> Result[PriceQuoteDTO]:
        """Pure price lookup shared with ConsumeActivity"""
        rule = self.catalog.get(activity_key)
        if rule is None:
            return Return.err(
                Error(
                    code=ErrorCode.UNKNOWN_ACTIVITY_KIND,
                    message=f"Unknown activity: {activity_key}",
                    details={"activity_key": activity_key},
                )
            )

        if quantity is not None:
            checked = validate_quantity(quantity)
            if checked.is_err():
                return Return.err(
                    Error(
                        code=checked.error.code,
                        message=checked.error.message,
                        details={"activity_key": activity_key, "quantity": quantity},
                    )
                )

        if rule.price_type == PriceType.FIXED:
            if quantity is not None and quantity > 1 and self.reject_quantity_for_fixed:
                return Return.err(
                    Error(
                        code=ErrorCode.INVALID_QUANTITY,
                        message=f"Activity {activity_key} has a fixed price and takes no quantity",
                        details={"activity_key": activity_key, "quantity": quantity},
                    )
                )
            effective_quantity = 1
            total_price = rule.base_price
        else:
            effective_quantity = quantity if quantity is not None else 1
            total_price = rule.base_price * effective_quantity

        return Return.ok(
            PriceQuoteDTO(
                activity_key=rule.activity_key,
                price_type=rule.price_type.value,
                quantity=effective_quantity,
                unit_price=rule.base_price,
                total_price=total_price,
                unit_name=rule.unit_name,
            )
        )

    async def execute(self, activity_key: str, quantity: Optional[int] = None) -> Result[PriceQuoteDTO]:
        """
        Quote the price of an activity

        Args:
            activity_key: Activity identifier
            quantity: Optional unit count

        Returns:
            Result[PriceQuoteDTO]: Price quote or typed failure
        """
        return self.resolve(activity_key, quantity)
