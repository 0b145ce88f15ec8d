#!/usr/bin/env python3
"""
Clock Scenarios - Sequence Overflow and Clock Regression

This example drives a generator with a controllable clock to show how it
behaves at the two edges of the tick accounting.

Key Concepts:
1. A tick is 10 ms; one instance mints at most 256 ids per tick
2. The 257th id in a tick waits for the next tick boundary, never longer
3. A clock that moves backwards is refused, not papered over
4. retry_on_clock_regression turns the refusal into a bounded wait

Run:
    python examples/clock_scenarios.py
"""

from datetime import datetime, timezone

from tickflake import ClockRegression, GeneratorConfig, IdentifierGenerator
from tickflake.kernel.logging import configure_logging
from tickflake.kernel.retry import retry_on_clock_regression
from tickflake.kernel.time import TestClock


def print_section(title: str) -> None:
    """Print section header"""
    print(f"\n{'='*70}")
    print(f"  {title}")
    print(f"{'='*70}\n")


def describe(generator: IdentifierGenerator, value: int) -> str:
    decoded = generator.decompose(value)
    return (
        f"{value:>20}  tick={decoded.elapsed_ticks} seq={decoded.sequence:<3} "
        f"machine={decoded.machine_id} at {decoded.timestamp.isoformat()}"
    )


def main() -> None:
    configure_logging(json_output=False, log_level="WARNING")

    epoch = datetime(2025, 1, 1, tzinfo=timezone.utc)
    clock = TestClock(datetime(2025, 6, 1, 12, 0, 0, 3000, tzinfo=timezone.utc))
    generator = IdentifierGenerator.create(
        GeneratorConfig.of(epoch=epoch, machine_id=7), clock=clock
    )

    print_section("1. Sequence overflow")
    ids = [generator.next_id() for _ in range(257)]
    print(describe(generator, ids[0]))
    print("  ...")
    print(describe(generator, ids[255]))
    print(describe(generator, ids[256]))
    print(f"\n  Waits for next tick: {len(clock.sleeps)}")
    print(f"  Slept: {clock.sleeps[0] * 1000:.1f}ms (remainder of the tick)")

    print_section("2. Clock regression (fail fast)")
    clock.advance_ms(-30)
    try:
        generator.next_id()
    except ClockRegression as exc:
        print(f"  Refused: {exc}")

    print_section("3. Bounded retry until the clock catches up")

    @retry_on_clock_regression(max_attempts=5, min_wait_ms=1, max_wait_ms=5)
    def next_id_with_retry() -> int:
        # Stand-in for wall-clock time passing between attempts
        clock.advance_ms(10)
        return generator.next_id()

    print(describe(generator, next_id_with_retry()))
    print(f"\n  Strictly increasing: {ids[-1] < generator.next_id()}")


if __name__ == "__main__":
    main()
