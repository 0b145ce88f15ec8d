"""
Test infrastructure components: logging and metrics.
"""

import logging
from datetime import timedelta

import pytest

from tickflake.generator import IdentifierGenerator
from tickflake.kernel.errors import ClockRegression, TimeRangeExhausted
from tickflake.kernel.logging import configure_logging, get_logger, is_production
from tickflake.kernel.metrics import (
    ids_generated_total,
    sequence_overflow_wait_seconds,
    time_range_exhausted_total,
)
from tickflake.kernel.time import TestClock
from tickflake.layout import MAX_ELAPSED_TICKS, TICK
from tickflake.settings import GeneratorConfig


class TestLoggingFramework:
    """Test structured logging framework."""

    def test_configure_logging_console(self, restore_logging) -> None:
        """Test logging configuration for console output."""
        configure_logging(json_output=False, log_level="INFO")
        logger = get_logger(__name__)
        assert logger is not None

    def test_configure_logging_json(self, restore_logging) -> None:
        """Test logging configuration for JSON output."""
        configure_logging(json_output=True, log_level="DEBUG")
        logger = get_logger(__name__)
        assert logger is not None

    def test_invalid_log_level(self, restore_logging) -> None:
        with pytest.raises(AttributeError):
            configure_logging(log_level="LOUD")

    def test_is_production(self, monkeypatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "Production")
        assert is_production()

        monkeypatch.delenv("ENVIRONMENT")
        assert not is_production()

    def test_overflow_and_regression_are_logged(
        self, generator: IdentifierGenerator, test_clock: TestClock, caplog
    ) -> None:
        """Test overflow waits log at DEBUG and clock regressions at WARNING."""
        caplog.set_level(logging.DEBUG)

        ids = [generator.next_id() for _ in range(257)]
        test_clock.advance_ms(-20)
        with pytest.raises(ClockRegression):
            generator.next_id()

        assert len(set(ids)) == 257
        waits = [r for r in caplog.records if "Sequence exhausted" in r.getMessage()]
        regressions = [r for r in caplog.records if "Clock moved backwards" in r.getMessage()]
        assert [r.levelno for r in waits] == [logging.DEBUG]
        assert [r.levelno for r in regressions] == [logging.WARNING]

    def test_configured_level_filters_records(self, generator: IdentifierGenerator, caplog, restore_logging) -> None:
        """Test a WARNING level configuration drops the overflow DEBUG record."""
        configure_logging(json_output=False, log_level="WARNING")

        for _ in range(257):
            generator.next_id()

        assert "Sequence exhausted" not in caplog.text


class TestMetrics:
    """Test Prometheus metrics collection."""

    def test_ids_generated_metric(self, generator: IdentifierGenerator) -> None:
        """Test ids_generated_total counts every minted id."""
        counter = ids_generated_total.labels(machine_id="42")
        before = counter._value.get()

        for _ in range(10):
            generator.next_id()

        assert counter._value.get() == before + 10

    def test_overflow_wait_observed(
        self, generator: IdentifierGenerator, test_clock: TestClock
    ) -> None:
        """Test the wait duration lands in the histogram."""
        histogram = sequence_overflow_wait_seconds.labels(machine_id="42")
        before = histogram._sum.get()
        test_clock.advance_ms(4)

        for _ in range(257):
            generator.next_id()

        assert histogram._sum.get() == pytest.approx(before + 0.006)

    def test_time_range_exhausted_metric(self, fixed_epoch) -> None:
        counter = time_range_exhausted_total.labels(machine_id="8")
        before = counter._value.get()
        clock = TestClock(fixed_epoch)
        generator = IdentifierGenerator.create(
            GeneratorConfig.of(epoch=fixed_epoch, machine_id=8), clock=clock
        )
        clock.advance((MAX_ELAPSED_TICKS + 10) * TICK + timedelta(milliseconds=1))

        with pytest.raises(TimeRangeExhausted):
            generator.next_id()

        assert counter._value.get() == before + 1
