"""
Clock abstraction for deterministic testing

The generator reads "now" and, at the sequence-overflow boundary, sleeps until
the next tick. Both go through a Clock so tests can freeze and fast-forward
time instead of waiting on the wall clock.
"""

import time
from datetime import datetime, timedelta, timezone
from typing import Protocol


def as_utc(value: datetime) -> datetime:
    """Return value as an aware UTC datetime; naive values are taken to be UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Clock(Protocol):
    """Protocol for clocks - allows deterministic testing"""

    def now(self) -> datetime:
        """Return current UTC datetime"""
        ...

    def sleep(self, seconds: float) -> None:
        """Suspend the caller for the given number of seconds"""
        ...


class SystemClock:
    """Production clock using the system wall clock"""

    def now(self) -> datetime:
        """Return current UTC time from system clock"""
        return datetime.now(timezone.utc)

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class TestClock:
    """
    Controllable clock for deterministic tests

    Time stands still until a test moves it. sleep() does not block: it
    advances the frozen time by the requested amount and records the request,
    so a test can count how often the generator waited for the next tick.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, initial_time: datetime | None = None) -> None:
        """
        Initialize with optional fixed time

        Args:
            initial_time: Starting time (defaults to Unix epoch), naive means UTC
        """
        self._current_time = as_utc(initial_time or datetime(1970, 1, 1))
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        """Return current test time"""
        return self._current_time

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self._current_time += timedelta(seconds=seconds)

    def set_time(self, dt: datetime) -> None:
        """Set current time to specific value"""
        self._current_time = as_utc(dt)

    def advance(self, delta: timedelta) -> None:
        """Move time by delta (negative values move it backwards)"""
        self._current_time += delta

    def advance_ms(self, milliseconds: float) -> None:
        """Advance time by specified milliseconds"""
        self._current_time += timedelta(milliseconds=milliseconds)


# Global default clock
default_clock: Clock = SystemClock()
