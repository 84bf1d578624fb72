"""Unit tests for bounded read retries"""

import pytest
from unittest.mock import AsyncMock, patch
from libs.retry import RetryPolicy, NO_RETRY, call_with_retry


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("libs.retry.asyncio.sleep", new=AsyncMock()) as sleep:
        yield sleep


@pytest.mark.asyncio
class TestCallWithRetry:

    async def test_returns_first_success(self):
        func = AsyncMock(return_value="balance")

        result = await call_with_retry(func, RetryPolicy(attempts=3))

        assert result == "balance"
        func.assert_called_once()

    async def test_retries_transient_error_then_succeeds(self, no_sleep):
        """
        Given: The first read fails with a transient error
        When: call_with_retry runs with 3 attempts
        Then: The second attempt's value is returned after one rollback and one sleep
        """
        func = AsyncMock(side_effect=[ConnectionError("reset"), "balance"])
        rollback = AsyncMock()

        result = await call_with_retry(func, RetryPolicy(attempts=3), on_retry=rollback)

        assert result == "balance"
        assert func.call_count == 2
        rollback.assert_called_once()
        no_sleep.assert_called_once()

    async def test_reraises_after_last_attempt(self):
        func = AsyncMock(side_effect=TimeoutError("slow"))

        with pytest.raises(TimeoutError):
            await call_with_retry(func, RetryPolicy(attempts=3))

        assert func.call_count == 3

    async def test_non_retryable_error_raises_immediately(self):
        func = AsyncMock(side_effect=KeyError("boom"))

        with pytest.raises(KeyError):
            await call_with_retry(func, RetryPolicy(attempts=5))

        func.assert_called_once()

    async def test_no_retry_policy_makes_single_attempt(self):
        func = AsyncMock(side_effect=ConnectionError("down"))

        with pytest.raises(ConnectionError):
            await call_with_retry(func, NO_RETRY)

        func.assert_called_once()


class TestRetryPolicy:

    def test_delay_grows_exponentially(self):
        policy = RetryPolicy(attempts=5, base_delay=0.1, max_delay=10.0, jitter_max=0.0)

        assert policy.compute_delay(0) == pytest.approx(0.1)
        assert policy.compute_delay(1) == pytest.approx(0.2)
        assert policy.compute_delay(2) == pytest.approx(0.4)

    def test_delay_capped_at_max(self):
        policy = RetryPolicy(attempts=10, base_delay=1.0, max_delay=2.5, jitter_max=0.0)

        assert policy.compute_delay(6) == 2.5
