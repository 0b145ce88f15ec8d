"""
Tests for bounded retry on clock regression
"""

import pytest

from tickflake.generator import IdentifierGenerator
from tickflake.kernel.errors import ClockRegression, TimeRangeExhausted
from tickflake.kernel.retry import retry_on_clock_regression
from tickflake.kernel.time import TestClock


def test_retry_recovers_when_clock_catches_up(
    generator: IdentifierGenerator, test_clock: TestClock
) -> None:
    first = generator.next_id()
    test_clock.advance_ms(-25)  # three ticks behind after flooring
    attempts: list[int] = []

    @retry_on_clock_regression(max_attempts=5, min_wait_ms=1, max_wait_ms=2)
    def mint() -> int:
        attempts.append(1)
        try:
            return generator.next_id()
        except ClockRegression:
            test_clock.advance_ms(10)
            raise

    second = mint()

    assert len(attempts) == 4
    assert second > first
    assert generator.sequence_number(second) == 1


def test_retry_gives_up_after_max_attempts(
    generator: IdentifierGenerator, test_clock: TestClock
) -> None:
    generator.next_id()
    test_clock.advance_ms(-1000)
    attempts: list[int] = []

    @retry_on_clock_regression(max_attempts=3, min_wait_ms=1, max_wait_ms=2)
    def mint() -> int:
        attempts.append(1)
        return generator.next_id()

    with pytest.raises(ClockRegression):
        mint()

    assert len(attempts) == 3


def test_retry_ignores_other_errors() -> None:
    attempts: list[int] = []

    @retry_on_clock_regression(max_attempts=3, min_wait_ms=1, max_wait_ms=2)
    def exhausted() -> int:
        attempts.append(1)
        raise TimeRangeExhausted(2**39, 2**39 - 1)

    with pytest.raises(TimeRangeExhausted):
        exhausted()

    assert len(attempts) == 1
