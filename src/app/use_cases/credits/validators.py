"""Input validators shared by use cases

Pure functions returning Result so they compose before any I/O.
"""

from typing import Any
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode

MAX_ACCOUNT_ID_LENGTH = 255


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_account_id(account_id: Any) -> Result[str]:
    if not isinstance(account_id, str) or not account_id.strip():
        return Return.err(
            Error(
                code=ErrorCode.INVALID_ACCOUNT_ID,
                message="account_id must be a non-empty string",
                details={"account_id": account_id},
            )
        )
    if len(account_id) > MAX_ACCOUNT_ID_LENGTH:
        return Return.err(
            Error(
                code=ErrorCode.INVALID_ACCOUNT_ID,
                message=f"account_id longer than {MAX_ACCOUNT_ID_LENGTH} characters",
                details={"account_id": account_id[:32]},
            )
        )
    return Return.ok(account_id)


def validate_amount(amount: Any) -> Result[int]:
    if not _is_int(amount) or amount <= 0:
        return Return.err(
            Error(
                code=ErrorCode.INVALID_AMOUNT,
                message=f"amount must be a positive integer, got {amount!r}",
                details={"amount": amount},
            )
        )
    return Return.ok(amount)


def validate_quantity(quantity: Any) -> Result[int]:
    if not _is_int(quantity) or quantity < 1:
        return Return.err(
            Error(
                code=ErrorCode.INVALID_QUANTITY,
                message=f"quantity must be an integer >= 1, got {quantity!r}",
                details={"quantity": quantity},
            )
        )
    return Return.ok(quantity)


def validate_plan_level(level: Any) -> Result[int]:
    # A level that cannot exist is reported like a missing one
    if not _is_int(level) or level < 1:
        return Return.err(
            Error(
                code=ErrorCode.UNKNOWN_PLAN_LEVEL,
                message=f"Unknown plan level {level!r}",
                details={"plan_level": level},
            )
        )
    return Return.ok(level)
