"""
Identifier generator

Mints 63-bit identifiers that strictly increase for each instance. All
mutable state is one (last tick, sequence) pair behind one lock. The critical
section only reads the clock and does integer arithmetic; the one intentional
wait, for the next tick after 256 identifiers in the same tick, happens
outside the lock.

Clock regression policy: fail fast. If the clock reports a tick earlier than
the last one used, next_id() raises ClockRegression and leaves the state as
it was. Callers who prefer to wait can use
tickflake.kernel.retry.retry_on_clock_regression, which bounds the wait.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from tickflake import layout
from tickflake.kernel import metrics
from tickflake.kernel.errors import (
    ClockRegression,
    GenerationError,
    InvalidConfiguration,
    TimeRangeExhausted,
)
from tickflake.kernel.logging import get_logger
from tickflake.kernel.time import Clock, default_clock
from tickflake.layout import MAX_ELAPSED_TICKS, MAX_MACHINE_ID, MAX_SEQUENCE, TICK, DecodedId
from tickflake.settings import GeneratorConfig

logger = get_logger(__name__)


@dataclass
class GeneratorState:
    """Mutable generation state, only touched while holding the generator lock"""

    last_tick: int = -1  # -1: no tick observed yet
    sequence: int = 0


class IdentifierGenerator:
    """
    Thread-safe generator of time-ordered 63-bit identifiers

    Example:
        config = GeneratorConfig.of(epoch="2025-01-01T00:00:00Z", machine_id=7)
        generator = IdentifierGenerator.create(config)
        new_id = generator.next_id()
        generator.decompose(new_id).timestamp
    """

    def __init__(
        self,
        config: GeneratorConfig,
        clock: Clock | None = None,
        check_machine_id: Callable[[int], bool] | None = None,
    ) -> None:
        """
        Validate settings against the clock and initialize state.

        Args:
            config: Epoch and machine id
            clock: Time source (default: system clock)
            check_machine_id: Optional callback that must accept the machine id,
                              e.g. a lookup against a registry of assigned ids

        Raises:
            InvalidConfiguration: If the epoch is in the future, the machine id is
                                  out of range, or check_machine_id rejects it
        """
        self._config = config
        self._clock = clock or default_clock
        self._epoch = config.epoch

        now = self._clock.now()
        if self._epoch > now:
            raise InvalidConfiguration(
                f"Epoch {self._epoch.isoformat()} is in the future (now {now.isoformat()})"
            )
        if not 0 <= config.machine_id <= MAX_MACHINE_ID:
            raise InvalidConfiguration(
                f"Machine id {config.machine_id} is outside [0, {MAX_MACHINE_ID}]"
            )
        if check_machine_id is not None and not check_machine_id(config.machine_id):
            raise InvalidConfiguration(f"Machine id {config.machine_id} was rejected")

        self._lock = threading.Lock()
        self._state = GeneratorState()

        label = str(config.machine_id)
        self._ids_generated = metrics.ids_generated_total.labels(machine_id=label)
        self._overflow_waits = metrics.sequence_overflow_waits_total.labels(machine_id=label)
        self._overflow_wait_seconds = metrics.sequence_overflow_wait_seconds.labels(
            machine_id=label
        )
        self._clock_regressions = metrics.clock_regressions_total.labels(machine_id=label)
        self._range_exhausted = metrics.time_range_exhausted_total.labels(machine_id=label)

        logger.info(
            "Identifier generator created",
            epoch=self._epoch.isoformat(),
            machine_id=config.machine_id,
        )

    @classmethod
    def create(
        cls,
        config: GeneratorConfig,
        clock: Clock | None = None,
        check_machine_id: Callable[[int], bool] | None = None,
    ) -> "IdentifierGenerator":
        """Build a generator, see __init__"""
        return cls(config, clock=clock, check_machine_id=check_machine_id)

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    @property
    def epoch(self) -> datetime:
        return self._epoch

    @property
    def machine_id(self) -> int:
        return self._config.machine_id

    @property
    def clock(self) -> Clock:
        return self._clock

    def _elapsed_ticks(self, now: datetime) -> int:
        return (now - self._epoch) // TICK

    def _until_next_tick(self, current_tick: int, now: datetime) -> timedelta:
        return self._epoch + (current_tick + 1) * TICK - now

    def next_id(self) -> int:
        """
        Mint the next identifier.

        Blocks for at most one tick when 256 identifiers have already been
        minted in the current tick.

        Raises:
            ClockRegression: If the clock reads earlier than the last used tick
            TimeRangeExhausted: If the epoch's 39-bit tick range is used up
        """
        while True:
            error: GenerationError | None = None
            new_id: int | None = None

            with self._lock:
                now = self._clock.now()
                current = self._elapsed_ticks(now)
                last_tick = self._state.last_tick

                if current < 0 or current < last_tick:
                    error = ClockRegression(last_tick, current)
                elif current > MAX_ELAPSED_TICKS:
                    error = TimeRangeExhausted(current, MAX_ELAPSED_TICKS)
                elif current > last_tick:
                    self._state.last_tick = current
                    self._state.sequence = 0
                    new_id = layout.compose(current, 0, self._config.machine_id)
                else:
                    sequence = (self._state.sequence + 1) & MAX_SEQUENCE
                    if sequence != 0:
                        self._state.sequence = sequence
                        new_id = layout.compose(current, sequence, self._config.machine_id)
                    else:
                        # Tick exhausted. The sequence stays at its maximum so
                        # concurrent callers in this tick wait as well.
                        wait = self._until_next_tick(current, now)

            if new_id is not None:
                self._ids_generated.inc()
                return new_id
            if error is not None:
                self._report(error)
                raise error

            seconds = wait.total_seconds()
            self._overflow_waits.inc()
            self._overflow_wait_seconds.observe(seconds)
            logger.debug(
                "Sequence exhausted, waiting for next tick",
                machine_id=self._config.machine_id,
                tick=current,
                wait_seconds=seconds,
            )
            self._clock.sleep(seconds)

    def _report(self, error: GenerationError) -> None:
        if isinstance(error, ClockRegression):
            self._clock_regressions.inc()
            logger.warning(
                "Clock moved backwards, refusing to generate identifier",
                machine_id=self._config.machine_id,
                last_tick=error.last_tick,
                current_tick=error.current_tick,
            )
        elif isinstance(error, TimeRangeExhausted):
            self._range_exhausted.inc()
            logger.error(
                "Elapsed tick range exhausted, epoch must be rotated",
                machine_id=self._config.machine_id,
                elapsed_ticks=error.elapsed_ticks,
                max_ticks=error.max_ticks,
            )

    # Decoding

    def elapsed_ticks(self, value: int) -> int:
        return layout.elapsed_ticks(value)

    def sequence_number(self, value: int) -> int:
        return layout.sequence_number(value)

    def decoded_machine_id(self, value: int) -> int:
        """Machine id field of an identifier (not necessarily this instance's)"""
        return layout.machine_id(value)

    def elapsed_time(self, value: int) -> timedelta:
        return layout.elapsed_time(value)

    def timestamp(self, value: int) -> datetime:
        return layout.timestamp(value, self._epoch)

    def decompose(self, value: int) -> DecodedId:
        return layout.decompose(value, self._epoch)
