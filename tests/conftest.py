"""
Pytest configuration and shared fixtures
"""

from datetime import datetime, timedelta, timezone
from ipaddress import IPv4Address
from typing import Iterator

import pytest

from tickflake import machine
from tickflake.generator import IdentifierGenerator
from tickflake.kernel.logging import configure_logging
from tickflake.kernel.time import TestClock
from tickflake.settings import GeneratorConfig


@pytest.fixture
def fixed_epoch() -> datetime:
    """Epoch used by most tests: 2025-01-01 00:00:00 UTC"""
    return datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def test_clock(fixed_epoch: datetime) -> TestClock:
    """
    Provide a frozen clock exactly one day after the epoch

    One day is 8,640,000 ticks, and the clock sits on a tick boundary.
    """
    return TestClock(fixed_epoch + timedelta(days=1))


@pytest.fixture
def config(fixed_epoch: datetime) -> GeneratorConfig:
    return GeneratorConfig.of(epoch=fixed_epoch, machine_id=42)


@pytest.fixture
def generator(config: GeneratorConfig, test_clock: TestClock) -> IdentifierGenerator:
    """Provide a generator driven by the frozen test clock"""
    return IdentifierGenerator.create(config, clock=test_clock)


@pytest.fixture
def private_address(monkeypatch: pytest.MonkeyPatch) -> IPv4Address:
    """
    Pin machine id discovery to 10.0.2.15 (machine id 0x020F = 527)

    Keeps tests independent of the network configuration of the test host.
    """
    address = IPv4Address("10.0.2.15")
    monkeypatch.setattr(machine, "private_ipv4_addresses", lambda: [address])
    return address


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Put the default console/INFO logging configuration back after the test"""
    yield
    configure_logging(json_output=False, log_level="INFO")
