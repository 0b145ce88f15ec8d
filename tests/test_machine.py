"""
Tests for default machine id discovery

Network lookups are replaced with fixed candidates so results do not depend
on the host running the tests.
"""

from ipaddress import IPv4Address

import pytest

from tickflake import machine
from tickflake.kernel.errors import InvalidConfiguration, MachineIdUnavailable


@pytest.mark.parametrize(
    "address,expected",
    [
        ("10.0.0.1", True),
        ("172.16.5.4", True),
        ("172.31.255.255", True),
        ("172.32.0.1", False),
        ("192.168.1.20", True),
        ("100.64.0.1", True),
        ("100.128.0.1", False),
        ("127.0.0.1", False),
        ("8.8.8.8", False),
        ("169.254.1.1", False),
    ],
)
def test_is_private_ipv4(address: str, expected: bool) -> None:
    assert machine.is_private_ipv4(IPv4Address(address)) is expected


def test_lower_16_bits() -> None:
    assert machine.lower_16_bits(IPv4Address("10.1.2.3")) == 0x0203
    assert machine.lower_16_bits(IPv4Address("192.168.255.255")) == 65535


def test_private_addresses_filtered_and_deduplicated(monkeypatch) -> None:
    monkeypatch.setattr(
        machine, "_hostname_addresses", lambda: ["127.0.1.1", "192.168.0.7", "10.0.0.5"]
    )
    monkeypatch.setattr(machine, "_outbound_address", lambda: ["192.168.0.7"])

    assert machine.private_ipv4_addresses() == [
        IPv4Address("192.168.0.7"),
        IPv4Address("10.0.0.5"),
    ]


def test_default_machine_id_uses_first_address(monkeypatch) -> None:
    monkeypatch.setattr(
        machine,
        "private_ipv4_addresses",
        lambda: [IPv4Address("10.0.1.2"), IPv4Address("10.0.9.9")],
    )

    assert machine.default_machine_id() == 258


def test_default_machine_id_unavailable(monkeypatch) -> None:
    monkeypatch.setattr(machine, "_hostname_addresses", lambda: ["127.0.0.1"])
    monkeypatch.setattr(machine, "_outbound_address", lambda: [])

    with pytest.raises(MachineIdUnavailable) as exc_info:
        machine.default_machine_id()

    assert isinstance(exc_info.value, InvalidConfiguration)


def test_probes_tolerate_network_failure(monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise OSError("network is unreachable")

    monkeypatch.setattr(machine.socket, "getaddrinfo", broken)
    monkeypatch.setattr(machine.socket, "socket", broken)

    assert machine.private_ipv4_addresses() == []
