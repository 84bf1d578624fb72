"""Unit tests for ReconcileLedger use case

Tests cover:
- Per credit type comparison of cached balances and transaction sums
- No discrepancies scenario
- Error handling
"""

from unittest.mock import AsyncMock
import pytest
from src.app.use_cases.credits import ReconcileLedger
from src.domain.credit_account import CreditAccount
from src.domain.credit_transaction import CreditType


@pytest.fixture
def reconcile_use_case(mock_account_repo, mock_transaction_repo):
    return ReconcileLedger(account_repo=mock_account_repo, transaction_repo=mock_transaction_repo)


@pytest.mark.asyncio
class TestReconcileLedger:

    async def test_detects_discrepancy_per_credit_type(
        self, reconcile_use_case, mock_account_repo, mock_transaction_repo
    ):
        """
        Given: bonus_credit=190000 but BONUS transactions sum to 200000
        When: Reconciliation runs
        Then: One BONUS discrepancy of -10000 is reported
        """
        # Arrange
        mock_account_repo.get_all.return_value = [
            CreditAccount(id=1, account_id="acc_1", current_credit=5000, bonus_credit=190000)
        ]
        mock_transaction_repo.get_balance_sums = AsyncMock(
            return_value={CreditType.CURRENT: 5000, CreditType.BONUS: 200000}
        )

        # Act
        result = await reconcile_use_case.execute()

        # Assert
        response = result.value
        assert response.total_accounts_checked == 1
        assert response.discrepancies_found == 1
        discrepancy = response.discrepancies[0]
        assert discrepancy.account_id == "acc_1"
        assert discrepancy.credit_type == "BONUS"
        assert discrepancy.cached_balance == 190000
        assert discrepancy.calculated_balance == 200000
        assert discrepancy.discrepancy == -10000

    async def test_balanced_accounts(self, reconcile_use_case, mock_account_repo, mock_transaction_repo):
        mock_account_repo.get_all.return_value = [
            CreditAccount(id=1, account_id="acc_1", current_credit=0, bonus_credit=190000),
            CreditAccount(id=2, account_id="acc_2", current_credit=0, bonus_credit=0),
        ]
        mock_transaction_repo.get_balance_sums = AsyncMock(
            side_effect=[{CreditType.BONUS: 190000}, {}]
        )

        result = await reconcile_use_case.execute()

        assert result.value.total_accounts_checked == 2
        assert result.value.discrepancies_found == 0
        mock_transaction_repo.get_balance_sums.assert_any_call(2)

    async def test_store_failure(self, reconcile_use_case, mock_account_repo):
        mock_account_repo.get_all = AsyncMock(side_effect=Exception("db down"))

        result = await reconcile_use_case.execute()

        assert result.error.code == "RECONCILIATION_FAILED"
