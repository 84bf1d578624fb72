"""Unit tests for PlanInstance validity rules"""

from datetime import datetime, timedelta
import pytest
from src.domain.plan_instance import PlanInstance, PlanInstanceStatus

NOW = datetime(2024, 3, 1, 12, 0, 0)


@pytest.fixture
def instance():
    return PlanInstance(
        id=1,
        account_id="acc_1",
        plan_level=2,
        price=100000,
        credit_amount=100000,
        bonus_credit=0,
        expiry_days=90,
        purchased_at=NOW,
        activated_at=NOW,
        expires_at=NOW + timedelta(days=90),
        is_active=True,
        is_reserved=False,
        status=PlanInstanceStatus.ACTIVE,
    )


class TestDaysRemaining:

    def test_full_window(self, instance):
        assert instance.days_remaining(NOW) == 90

    def test_partial_day_rounds_up(self, instance):
        assert instance.days_remaining(NOW + timedelta(days=89, hours=1)) == 1

    def test_clamped_to_zero_after_expiry(self, instance):
        assert instance.days_remaining(NOW + timedelta(days=120)) == 0


class TestIsExpired:

    def test_not_expired_before_expires_at(self, instance):
        assert not instance.is_expired(NOW + timedelta(days=89))

    def test_expired_at_exact_expires_at(self, instance):
        assert instance.is_expired(instance.expires_at)


class TestTransitions:

    def test_activate_restarts_validity_window(self, instance):
        """
        Given: A reserved instance bought on day 0
        When: It is activated 30 days later
        Then: Its 90 day window starts at activation
        """
        instance.is_active = False
        instance.is_reserved = True
        instance.status = PlanInstanceStatus.RESERVED
        later = NOW + timedelta(days=30)

        instance.activate(later)

        assert instance.is_active
        assert not instance.is_reserved
        assert instance.status == PlanInstanceStatus.ACTIVE
        assert instance.activated_at == later
        assert instance.expires_at == later + timedelta(days=90)

    def test_close_marks_inactive(self, instance):
        instance.close(PlanInstanceStatus.EXHAUSTED, NOW)

        assert not instance.is_active
        assert instance.status == PlanInstanceStatus.EXHAUSTED
        assert instance.closed_at == NOW

    def test_total_credit(self, instance):
        assert instance.total_credit == 100000
