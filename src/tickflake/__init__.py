"""
tickflake - distributed, time-ordered 63-bit identifiers

Each generator instance combines 10 ms ticks since a fixed epoch, a per-tick
sequence and a fixed machine id into an integer that is unique across the
fleet (given unique machine ids) and strictly increasing per instance.
"""

from tickflake.generator import IdentifierGenerator
from tickflake.kernel.errors import (
    ClockRegression,
    InvalidConfiguration,
    InvalidIdentifier,
    TickflakeError,
    TimeRangeExhausted,
)
from tickflake.layout import (
    DecodedId,
    decompose,
    elapsed_ticks,
    elapsed_time,
    machine_id,
    sequence_number,
    timestamp,
)
from tickflake.settings import GeneratorConfig

__version__ = "0.1.0"
__all__ = [
    "IdentifierGenerator",
    "GeneratorConfig",
    "DecodedId",
    "decompose",
    "elapsed_ticks",
    "elapsed_time",
    "machine_id",
    "sequence_number",
    "timestamp",
    "TickflakeError",
    "InvalidConfiguration",
    "ClockRegression",
    "TimeRangeExhausted",
    "InvalidIdentifier",
    "__version__",
]
