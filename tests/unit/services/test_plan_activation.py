"""Unit tests for PlanActivator

Tests cover:
- Credit grant on activation (zero amounts skipped)
- Validity window restarting at activation
- Close + promotion of the oldest reserved instance
"""

from datetime import datetime, timedelta
import pytest
from src.app.services.credit_ledger import CreditLedger
from src.app.services.plan_activation import PlanActivator
from src.domain.credit_transaction import CreditType, TransactionType
from src.domain.plan_instance import PlanInstance, PlanInstanceStatus

NOW = datetime(2024, 6, 1, 12, 0, 0)


def _instance(instance_id, level=1, credit=0, bonus=200000, days=60, active=False):
    purchased = NOW - timedelta(days=10)
    return PlanInstance(
        id=instance_id,
        account_id="acc_1",
        plan_level=level,
        price=credit,
        credit_amount=credit,
        bonus_credit=bonus,
        expiry_days=days,
        purchased_at=purchased,
        expires_at=purchased + timedelta(days=days),
        is_active=active,
        is_reserved=not active,
        status=PlanInstanceStatus.ACTIVE if active else PlanInstanceStatus.RESERVED,
    )


@pytest.fixture
def activator(mock_account_repo, mock_transaction_repo, mock_plan_repo):
    ledger = CreditLedger(mock_account_repo, mock_transaction_repo)
    return PlanActivator(ledger, mock_plan_repo)


@pytest.mark.asyncio
class TestGrant:

    async def test_grants_both_balances(self, activator):
        """
        Given: A level 3 instance (1,000,000 current + 300,000 bonus)
        When: Its credit is granted
        Then: Two PURCHASE_GRANT transactions reference the instance
        """
        instance = _instance(7, level=3, credit=1000000, bonus=300000, days=180)

        grants = await activator.grant(instance)

        assert [(g.credit_type, g.amount) for g in grants] == [
            (CreditType.CURRENT, 1000000),
            (CreditType.BONUS, 300000),
        ]
        for grant in grants:
            assert grant.transaction_type == TransactionType.PURCHASE_GRANT
            assert grant.reason == "PLAN_LEVEL_3"
            assert grant.reference_type == "plan_instance"
            assert grant.reference_id == "7"

    async def test_zero_amount_skipped(self, activator, mock_transaction_repo):
        grants = await activator.grant(_instance(8, credit=0, bonus=200000))

        assert len(grants) == 1
        assert grants[0].credit_type == CreditType.BONUS
        assert mock_transaction_repo.create.call_count == 1


@pytest.mark.asyncio
class TestActivation:

    async def test_activation_restarts_validity_window(self, activator, mock_plan_repo):
        instance = _instance(9, days=60)

        await activator.activate(instance, NOW)

        assert instance.is_active is True
        assert instance.is_reserved is False
        assert instance.status == PlanInstanceStatus.ACTIVE
        assert instance.activated_at == NOW
        assert instance.expires_at == NOW + timedelta(days=60)
        mock_plan_repo.update.assert_called_once_with(instance)

    async def test_close_promotes_oldest_reserved(self, activator, mock_plan_repo):
        """
        Given: An active instance and two reserved ones
        When: The active instance is closed as EXPIRED
        Then: It is inactive and the oldest reserved instance becomes active
        """
        active = _instance(1, active=True)
        oldest = _instance(2, level=2, credit=100000, bonus=0, days=90)
        newer = _instance(3)
        mock_plan_repo.get_reserved_by_account_id.return_value = [oldest, newer]

        promoted = await activator.close_and_promote(active, PlanInstanceStatus.EXPIRED, NOW)

        assert active.is_active is False
        assert active.status == PlanInstanceStatus.EXPIRED
        assert active.closed_at == NOW
        assert promoted is oldest
        assert oldest.is_active is True
        assert newer.is_reserved is True
        mock_plan_repo.get_reserved_by_account_id.assert_called_once_with("acc_1")

    async def test_close_without_reserved(self, activator, mock_transaction_repo):
        active = _instance(1, active=True)

        promoted = await activator.close_and_promote(active, PlanInstanceStatus.EXHAUSTED, NOW)

        assert promoted is None
        assert active.status == PlanInstanceStatus.EXHAUSTED
        mock_transaction_repo.create.assert_not_called()
