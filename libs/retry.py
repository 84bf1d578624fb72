"""Bounded retry with exponential backoff for idempotent reads

Only ever wrap read-only work with this helper. Mutations whose outcome is
unknown after a failure must be re-queried by the caller, not replayed.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration for transient store errors"""

    attempts: int = 1
    base_delay: float = 0.05
    max_delay: float = 1.0
    jitter_max: float = 0.01
    retry_on: Tuple[Type[BaseException], ...] = (ConnectionError, TimeoutError)

    def compute_delay(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (zero-based), capped at max_delay"""
        delay = self.base_delay * (2 ** attempt) + random.uniform(0, self.jitter_max)
        return min(delay, self.max_delay)


NO_RETRY = RetryPolicy(attempts=1)


async def call_with_retry(
    func: Callable[[], Awaitable[Any]],
    policy: RetryPolicy,
    on_retry: Optional[Callable[[], Awaitable[Any]]] = None,
) -> Any:
    """
    Await ``func()`` up to ``policy.attempts`` times

    Args:
        func: Zero-argument coroutine factory performing the read
        policy: Retry policy
        on_retry: Optional coroutine factory awaited before each retry
            (e.g. a session rollback to clear a failed transaction)

    Returns:
        Whatever ``func`` returns

    Raises:
        The last retryable exception once attempts are exhausted, or any
        non-retryable exception immediately
    """
    attempts = max(1, policy.attempts)
    for attempt in range(attempts):
        try:
            return await func()
        except policy.retry_on as exc:
            if attempt + 1 >= attempts:
                logger.error(f"All {attempts} read attempts failed: {exc}")
                raise
            delay = policy.compute_delay(attempt)
            logger.warning(
                f"Read attempt {attempt + 1}/{attempts} failed, retrying in {delay:.2f}s: {exc}"
            )
            if on_retry is not None:
                await on_retry()
            await asyncio.sleep(delay)
