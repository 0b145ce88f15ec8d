"""
Identifier bit layout

A tickflake identifier is a 63-bit non-negative integer, most significant
field first:

    | elapsed ticks (39) | sequence (8) | machine id (16) |

Elapsed ticks count 10 ms quanta since the generator's epoch, which gives
about 174 years of range. The functions here are pure: decoding needs only
the identifier (and the epoch, for timestamps), never a generator instance.
"""

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

from tickflake.kernel.errors import InvalidIdentifier

BITS_TIME = 39
BITS_SEQUENCE = 8
BITS_MACHINE_ID = 16

TICK = timedelta(milliseconds=10)

MAX_ELAPSED_TICKS = (1 << BITS_TIME) - 1
MAX_SEQUENCE = (1 << BITS_SEQUENCE) - 1
MAX_MACHINE_ID = (1 << BITS_MACHINE_ID) - 1
MAX_ID = (1 << (BITS_TIME + BITS_SEQUENCE + BITS_MACHINE_ID)) - 1

SEQUENCE_SHIFT = BITS_MACHINE_ID
TIME_SHIFT = BITS_SEQUENCE + BITS_MACHINE_ID


class DecodedId(BaseModel):
    """All fields of an identifier, resolved against an epoch"""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, le=MAX_ID)
    elapsed_ticks: int = Field(ge=0, le=MAX_ELAPSED_TICKS)
    sequence: int = Field(ge=0, le=MAX_SEQUENCE)
    machine_id: int = Field(ge=0, le=MAX_MACHINE_ID)
    timestamp: datetime


def _check_id(value: int) -> int:
    if not 0 <= value <= MAX_ID:
        raise InvalidIdentifier(f"Identifier {value} is outside [0, {MAX_ID}]")
    return value


def compose(elapsed_ticks: int, sequence: int, machine_id: int) -> int:
    """
    Pack the three fields into an identifier.

    Raises:
        InvalidIdentifier: If any field does not fit its bit width
    """
    if not 0 <= elapsed_ticks <= MAX_ELAPSED_TICKS:
        raise InvalidIdentifier(
            f"Elapsed ticks {elapsed_ticks} is outside [0, {MAX_ELAPSED_TICKS}]"
        )
    if not 0 <= sequence <= MAX_SEQUENCE:
        raise InvalidIdentifier(f"Sequence {sequence} is outside [0, {MAX_SEQUENCE}]")
    if not 0 <= machine_id <= MAX_MACHINE_ID:
        raise InvalidIdentifier(f"Machine id {machine_id} is outside [0, {MAX_MACHINE_ID}]")
    return (elapsed_ticks << TIME_SHIFT) | (sequence << SEQUENCE_SHIFT) | machine_id


def elapsed_ticks(value: int) -> int:
    """Ticks since the epoch. The field is top-aligned, so no mask is needed."""
    return _check_id(value) >> TIME_SHIFT


def sequence_number(value: int) -> int:
    return (_check_id(value) >> SEQUENCE_SHIFT) & MAX_SEQUENCE


def machine_id(value: int) -> int:
    return _check_id(value) & MAX_MACHINE_ID


def elapsed_time(value: int) -> timedelta:
    """Time since the epoch, at tick resolution"""
    return elapsed_ticks(value) * TICK


def timestamp(value: int, epoch: datetime) -> datetime:
    """Start of the tick in which the identifier was minted"""
    return epoch + elapsed_time(value)


def decompose(value: int, epoch: datetime) -> DecodedId:
    """
    Split an identifier into its fields.

    Args:
        value: Identifier produced by a generator
        epoch: The epoch of the generator that produced it

    Returns:
        DecodedId with ticks, sequence, machine id and timestamp
    """
    return DecodedId(
        id=_check_id(value),
        elapsed_ticks=elapsed_ticks(value),
        sequence=sequence_number(value),
        machine_id=machine_id(value),
        timestamp=timestamp(value, epoch),
    )
