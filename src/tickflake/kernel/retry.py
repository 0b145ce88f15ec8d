"""
Bounded retry for clock regression.

next_id() fails fast when the clock moves backwards. Callers that would
rather wait for the clock to catch up wrap their call with
retry_on_clock_regression, which retries with exponential backoff a fixed
number of times and then re-raises the last ClockRegression.
"""

from collections.abc import Callable
from typing import TypeVar

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from tickflake.kernel.errors import ClockRegression
from tickflake.kernel.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def retry_on_clock_regression(
    max_attempts: int = 3,
    min_wait_ms: int = 10,
    max_wait_ms: int = 100,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Retry decorator for ClockRegression.

    Small backward steps (NTP slews, VM migration) usually resolve within a
    few ticks. Larger jumps exhaust the attempts and surface to the caller.

    Args:
        max_attempts: Maximum number of attempts, including the first (default: 3)
        min_wait_ms: Minimum wait time in milliseconds (default: 10, one tick)
        max_wait_ms: Maximum wait time in milliseconds (default: 100)

    Returns:
        Decorated function that retries on ClockRegression

    Example:
        @retry_on_clock_regression(max_attempts=5)
        def new_order_id() -> int:
            return generator.next_id()
    """
    return retry(
        retry=retry_if_exception_type(ClockRegression),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(
            multiplier=min_wait_ms / 1000.0,
            min=min_wait_ms / 1000.0,
            max=max_wait_ms / 1000.0,
        ),
        before_sleep=lambda retry_state: logger.warning(
            "Clock regression detected, retrying",
            attempt=retry_state.attempt_number,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        ),
        reraise=True,
    )
