"""
Kernel - clock, errors, logging, metrics and retry support

Everything the generator depends on besides its own bit arithmetic lives here,
so it can be swapped or observed without touching the generation logic.
"""

from tickflake.kernel.errors import (
    ClockRegression,
    GenerationError,
    InvalidConfiguration,
    InvalidIdentifier,
    MachineIdUnavailable,
    TickflakeError,
    TimeRangeExhausted,
)
from tickflake.kernel.time import Clock, SystemClock, TestClock

__all__ = [
    # Time
    "Clock",
    "SystemClock",
    "TestClock",
    # Errors
    "TickflakeError",
    "InvalidConfiguration",
    "MachineIdUnavailable",
    "GenerationError",
    "ClockRegression",
    "TimeRangeExhausted",
    "InvalidIdentifier",
]
