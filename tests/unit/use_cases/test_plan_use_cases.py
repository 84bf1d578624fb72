"""Unit tests for plan use cases

Tests cover:
- PurchasePlan activation vs reservation
- Settling an overdue active plan at purchase time
- GetPlanStatus reporting
- ExpireDuePlans sweep, promotion and per-account failure isolation
- ListPlans
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
import pytest
from src.app.use_cases.plans import (
    ExpireDuePlans,
    GetPlanStatus,
    ListPlans,
    PurchasePlan,
    PurchasePlanCommandDTO,
)
from src.domain.credit_account import CreditAccount
from src.domain.plan_instance import PlanInstance, PlanInstanceStatus

NOW = datetime(2024, 6, 1, 12, 0, 0)


def _instance(instance_id, account_id="acc_1", active=True, expires_at=None, level=1, bonus=200000):
    return PlanInstance(
        id=instance_id,
        account_id=account_id,
        plan_level=level,
        price=0,
        credit_amount=0,
        bonus_credit=bonus,
        expiry_days=60,
        purchased_at=NOW - timedelta(days=30),
        activated_at=NOW - timedelta(days=30) if active else None,
        expires_at=expires_at or NOW + timedelta(days=30),
        is_active=active,
        is_reserved=not active,
        status=PlanInstanceStatus.ACTIVE if active else PlanInstanceStatus.RESERVED,
    )


@pytest.fixture
def stored_account(mock_account_repo):
    """Account repo that returns whatever was last created"""
    async def create(account):
        account.id = 1
        mock_account_repo.get_by_account_id.return_value = account
        return account

    mock_account_repo.create = AsyncMock(side_effect=create)
    return mock_account_repo


@pytest.fixture
def purchase_use_case(mock_uow, stored_account, mock_transaction_repo, mock_plan_repo, plan_catalog):
    return PurchasePlan(
        uow=mock_uow,
        account_repo=stored_account,
        transaction_repo=mock_transaction_repo,
        plan_repo=mock_plan_repo,
        plan_catalog=plan_catalog,
    )


@pytest.fixture
def expire_use_case(mock_uow, stored_account, mock_transaction_repo, mock_plan_repo):
    return ExpireDuePlans(
        uow=mock_uow,
        account_repo=stored_account,
        transaction_repo=mock_transaction_repo,
        plan_repo=mock_plan_repo,
    )


@pytest.mark.asyncio
class TestPurchasePlan:

    async def test_first_purchase_activates_and_grants(
        self, purchase_use_case, stored_account, mock_transaction_repo, mock_uow
    ):
        """
        Given: An account with no plans
        When: Level 1 is purchased
        Then: Instance is ACTIVE, expires in 60 days, 200000 BONUS is granted
        """
        # Act
        result = await purchase_use_case.execute(
            PurchasePlanCommandDTO(account_id="acc_1", plan_level=1), now=NOW
        )

        # Assert
        assert result.is_ok()
        instance = result.value
        assert instance.status == "ACTIVE"
        assert instance.is_active is True
        assert instance.activated_at == NOW
        assert instance.expires_at == NOW + timedelta(days=60)
        assert instance.bonus_credit == 200000
        account = stored_account.get_by_account_id.return_value
        assert account.bonus_credit == 200000
        assert account.current_credit == 0
        grant = mock_transaction_repo.create.call_args.args[0]
        assert grant.transaction_type.value == "purchase_grant"
        assert grant.reason == "PLAN_LEVEL_1"
        mock_uow.commit.assert_called_once()

    async def test_second_purchase_is_reserved(
        self, purchase_use_case, mock_plan_repo, mock_transaction_repo
    ):
        """
        Given: A running level 1 plan
        When: Level 2 is purchased
        Then: Instance is RESERVED and no credit is granted
        """
        mock_plan_repo.get_active_by_account_id.return_value = _instance(100)

        result = await purchase_use_case.execute(
            PurchasePlanCommandDTO(account_id="acc_1", plan_level=2), now=NOW
        )

        instance = result.value
        assert instance.status == "RESERVED"
        assert instance.is_reserved is True
        assert instance.is_active is False
        assert instance.credit_amount == 100000
        mock_transaction_repo.create.assert_not_called()

    async def test_overdue_active_plan_is_settled_first(
        self, purchase_use_case, mock_plan_repo
    ):
        overdue = _instance(100, expires_at=NOW - timedelta(hours=1))
        mock_plan_repo.get_active_by_account_id.return_value = overdue

        result = await purchase_use_case.execute(
            PurchasePlanCommandDTO(account_id="acc_1", plan_level=2), now=NOW
        )

        assert overdue.status == PlanInstanceStatus.EXPIRED
        assert overdue.closed_at == NOW
        assert result.value.status == "ACTIVE"

    async def test_overdue_plan_promotes_reserved_before_new_purchase(
        self, purchase_use_case, mock_plan_repo
    ):
        overdue = _instance(100, expires_at=NOW - timedelta(hours=1))
        queued = _instance(101, active=False)
        mock_plan_repo.get_active_by_account_id.return_value = overdue
        mock_plan_repo.get_reserved_by_account_id.return_value = [queued]

        result = await purchase_use_case.execute(
            PurchasePlanCommandDTO(account_id="acc_1", plan_level=2), now=NOW
        )

        assert queued.is_active is True
        assert result.value.status == "RESERVED"

    @pytest.mark.parametrize("level", [0, 7, 99])
    async def test_unknown_plan_level(self, purchase_use_case, stored_account, level):
        result = await purchase_use_case.execute(
            PurchasePlanCommandDTO(account_id="acc_1", plan_level=level), now=NOW
        )

        assert result.error.code == "UNKNOWN_PLAN_LEVEL"
        stored_account.get_by_account_id.assert_not_called()

    async def test_store_failure_rolls_back(self, purchase_use_case, mock_plan_repo, mock_uow):
        mock_plan_repo.create = AsyncMock(side_effect=Exception("unique violation"))

        result = await purchase_use_case.execute(
            PurchasePlanCommandDTO(account_id="acc_1", plan_level=1), now=NOW
        )

        assert result.error.code == "PURCHASE_PLAN_FAILED"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestGetPlanStatus:

    async def test_status_with_active_and_reserved(self, mock_account_repo, mock_plan_repo):
        mock_account_repo.get_by_account_id.return_value = CreditAccount(
            id=1, account_id="acc_1", current_credit=0, bonus_credit=190000
        )
        active = _instance(100, expires_at=NOW + timedelta(days=29, hours=1))
        reserved = _instance(101, active=False)
        mock_plan_repo.get_active_by_account_id.return_value = active
        mock_plan_repo.get_reserved_by_account_id.return_value = [reserved]
        mock_plan_repo.get_history.return_value = [reserved, active]

        result = await GetPlanStatus(mock_account_repo, mock_plan_repo).execute("acc_1", now=NOW)

        status = result.value
        assert status.has_active_plan is True
        assert status.active_plan.id == 100
        assert status.days_remaining == 30
        assert status.total_available_credit == 190000
        assert [p.id for p in status.reserved_plans] == [101]
        assert len(status.history) == 2
        mock_plan_repo.get_history.assert_called_once_with("acc_1", limit=10)

    async def test_unknown_account_has_zero_balances(self, mock_account_repo, mock_plan_repo):
        result = await GetPlanStatus(mock_account_repo, mock_plan_repo).execute("new_acc", now=NOW)

        status = result.value
        assert status.has_active_plan is False
        assert status.active_plan is None
        assert status.days_remaining == 0
        assert status.total_available_credit == 0

    async def test_overdue_active_plan_reported_as_none(self, mock_account_repo, mock_plan_repo):
        mock_plan_repo.get_active_by_account_id.return_value = _instance(100, expires_at=NOW)

        result = await GetPlanStatus(mock_account_repo, mock_plan_repo).execute("acc_1", now=NOW)

        assert result.value.has_active_plan is False
        assert result.value.days_remaining == 0

    async def test_store_failure(self, mock_account_repo, mock_plan_repo):
        mock_plan_repo.get_history = AsyncMock(side_effect=Exception("boom"))

        result = await GetPlanStatus(mock_account_repo, mock_plan_repo).execute("acc_1", now=NOW)

        assert result.error.code == "GET_PLAN_STATUS_FAILED"


@pytest.mark.asyncio
class TestExpireDuePlans:

    async def test_expires_and_promotes(self, expire_use_case, stored_account, mock_plan_repo, mock_uow):
        """
        Given: An active plan with expires_at == now and a reserved level 2 plan
        When: The sweep runs at now
        Then: Active plan is EXPIRED, reserved plan is ACTIVE and granted, committed
        """
        # Arrange
        stored_account.get_by_account_id.return_value = CreditAccount(
            id=1, account_id="acc_1", current_credit=0, bonus_credit=5000
        )
        due = _instance(100, expires_at=NOW)
        queued = _instance(101, active=False, level=2, bonus=0)
        queued.credit_amount = 100000
        mock_plan_repo.get_due_active.return_value = [due]
        mock_plan_repo.get_by_id.return_value = due
        mock_plan_repo.get_reserved_by_account_id.return_value = [queued]

        # Act
        result = await expire_use_case.execute(NOW)

        # Assert
        summary = result.value
        assert summary.expired_count == 1
        assert summary.activated_count == 1
        assert summary.failed_count == 0
        assert due.status == PlanInstanceStatus.EXPIRED
        assert queued.status == PlanInstanceStatus.ACTIVE
        assert queued.expires_at == NOW + timedelta(days=60)
        account = stored_account.get_by_account_id.return_value
        assert account.current_credit == 100000
        assert account.bonus_credit == 5000
        mock_plan_repo.get_by_id.assert_called_once_with(100, for_update=True)
        mock_uow.commit.assert_called_once()

    async def test_already_closed_instance_is_skipped(self, expire_use_case, mock_plan_repo, mock_uow):
        due = _instance(100, expires_at=NOW)
        closed = _instance(100, active=False, expires_at=NOW)
        mock_plan_repo.get_due_active.return_value = [due]
        mock_plan_repo.get_by_id.return_value = closed

        result = await expire_use_case.execute(NOW)

        assert result.value.expired_count == 0
        mock_uow.commit.assert_not_called()

    async def test_nothing_due(self, expire_use_case):
        result = await expire_use_case.execute(NOW)

        assert result.value.expired_count == 0
        assert result.value.run_at == NOW

    async def test_failure_isolated_per_account(self, expire_use_case, mock_plan_repo, mock_uow):
        """One failing account is rolled back and counted, the rest still expire"""
        first = _instance(100, account_id="acc_1", expires_at=NOW)
        second = _instance(200, account_id="acc_2", expires_at=NOW)
        mock_plan_repo.get_due_active.return_value = [first, second]
        mock_plan_repo.get_by_id = AsyncMock(side_effect=[Exception("deadlock"), second])

        result = await expire_use_case.execute(NOW)

        assert result.value.failed_count == 1
        assert result.value.expired_count == 1
        assert second.status == PlanInstanceStatus.EXPIRED
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_timezone_aware_now_is_normalized(self, expire_use_case, mock_plan_repo):
        aware = datetime(2024, 6, 1, 15, 30, tzinfo=timezone(timedelta(hours=3, minutes=30)))

        result = await expire_use_case.execute(aware)

        mock_plan_repo.get_due_active.assert_called_once_with(NOW)
        assert result.value.run_at == NOW

    async def test_load_failure(self, expire_use_case, mock_plan_repo, mock_uow):
        mock_plan_repo.get_due_active = AsyncMock(side_effect=Exception("db down"))

        result = await expire_use_case.execute(NOW)

        assert result.error.code == "EXPIRE_PLANS_FAILED"
        mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
class TestListPlans:

    async def test_lists_active_plans(self, plan_catalog):
        result = await ListPlans(plan_catalog).execute()

        plans = result.value
        assert [p.level for p in plans] == [1, 2, 3, 4, 5, 6]
        assert plans[2].total_credit == 1300000
        assert plans[1].is_popular is True
