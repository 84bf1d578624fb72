"""Unit tests for input validators"""

import pytest
from src.app.use_cases.credits.validators import (
    validate_account_id,
    validate_amount,
    validate_plan_level,
    validate_quantity,
)


class TestValidators:

    @pytest.mark.parametrize("account_id", ["", "   ", None, 42, "x" * 256])
    def test_invalid_account_id(self, account_id):
        result = validate_account_id(account_id)

        assert result.is_err()
        assert result.error.code == "INVALID_ACCOUNT_ID"

    def test_valid_account_id(self):
        assert validate_account_id("acc_123").value == "acc_123"

    @pytest.mark.parametrize("amount", [0, -1, 1.5, "100", True, None])
    def test_invalid_amount(self, amount):
        result = validate_amount(amount)

        assert result.error.code == "INVALID_AMOUNT"

    def test_valid_amount(self):
        assert validate_amount(1).value == 1

    @pytest.mark.parametrize("quantity", [0, -3, 2.0])
    def test_invalid_quantity(self, quantity):
        assert validate_quantity(quantity).error.code == "INVALID_QUANTITY"

    @pytest.mark.parametrize("level", [0, -1, "2"])
    def test_impossible_plan_level_is_unknown(self, level):
        assert validate_plan_level(level).error.code == "UNKNOWN_PLAN_LEVEL"
