"""
Custom exceptions for tickflake

Construction errors are fatal and leave no generator behind. Generation errors
surface synchronously from next_id() and never leave the generator state
half-updated.
"""


class TickflakeError(Exception):
    """Base exception for all tickflake errors"""

    pass


class InvalidConfiguration(TickflakeError):
    """Raised when a generator cannot be built from the given settings"""

    pass


class MachineIdUnavailable(InvalidConfiguration):
    """Raised when no private IPv4 address exists to derive a default machine id"""

    def __init__(self, message: str = "") -> None:
        super().__init__(
            message or "No private IPv4 address found - pass machine_id explicitly"
        )


class GenerationError(TickflakeError):
    """Base class for errors raised by next_id()"""

    pass


class ClockRegression(GenerationError):
    """
    Raised when the clock reports a tick earlier than the last one used

    The generator refuses to emit an identifier rather than risk a duplicate
    or an out-of-order value. Callers who would rather wait can wrap the call
    with retry_on_clock_regression.
    """

    def __init__(self, last_tick: int, current_tick: int) -> None:
        self.last_tick = last_tick
        self.current_tick = current_tick
        super().__init__(
            f"Clock moved backwards: tick {current_tick} is behind last used tick "
            f"{last_tick} ({last_tick - current_tick} ticks)"
        )


class TimeRangeExhausted(GenerationError):
    """
    Raised when elapsed ticks no longer fit in the time field

    Fatal for the instance - the epoch must be rotated.
    """

    def __init__(self, elapsed_ticks: int, max_ticks: int) -> None:
        self.elapsed_ticks = elapsed_ticks
        self.max_ticks = max_ticks
        super().__init__(
            f"Elapsed ticks {elapsed_ticks} exceed the maximum {max_ticks} - "
            "the configured epoch is exhausted"
        )


class InvalidIdentifier(TickflakeError, ValueError):
    """Raised when a value cannot be an identifier or an identifier field"""

    pass
