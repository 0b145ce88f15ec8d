"""
Default machine id discovery

When no machine id is configured, the lower 16 bits of the host's private
IPv4 address are used. Hosts on the same /16 get distinct ids, which suits
most single-VPC fleets; anything larger must assign machine ids explicitly.
"""

import socket
from ipaddress import IPv4Address, IPv4Network

from tickflake.kernel.errors import MachineIdUnavailable
from tickflake.kernel.logging import get_logger

logger = get_logger(__name__)

PRIVATE_NETWORKS = (
    IPv4Network("10.0.0.0/8"),
    IPv4Network("172.16.0.0/12"),
    IPv4Network("192.168.0.0/16"),
    IPv4Network("100.64.0.0/10"),  # carrier-grade NAT
)

# Never contacted: connecting a UDP socket only selects the outbound interface.
_PROBE_ADDRESS = ("10.254.254.254", 1)


def is_private_ipv4(address: IPv4Address) -> bool:
    return any(address in network for network in PRIVATE_NETWORKS)


def _hostname_addresses() -> list[str]:
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError as exc:
        logger.debug("Host name resolution failed", error=str(exc))
        return []
    return [info[4][0] for info in infos]


def _outbound_address() -> list[str]:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(_PROBE_ADDRESS)
            return [sock.getsockname()[0]]
    except OSError as exc:
        logger.debug("Outbound interface probe failed", error=str(exc))
        return []


def private_ipv4_addresses() -> list[IPv4Address]:
    """
    Private IPv4 addresses of this host, in discovery order.

    Candidates come from resolving the host name and from the interface the
    kernel would route private traffic through.
    """
    found: list[IPv4Address] = []
    for raw in _hostname_addresses() + _outbound_address():
        address = IPv4Address(raw)
        if is_private_ipv4(address) and address not in found:
            found.append(address)
    return found


def lower_16_bits(address: IPv4Address) -> int:
    return int(address) & 0xFFFF


def default_machine_id() -> int:
    """
    Derive a machine id from the first private IPv4 address.

    Raises:
        MachineIdUnavailable: If the host has no private IPv4 address
    """
    addresses = private_ipv4_addresses()
    if not addresses:
        raise MachineIdUnavailable()
    machine_id = lower_16_bits(addresses[0])
    logger.info(
        "Derived machine id from private address",
        address=str(addresses[0]),
        machine_id=machine_id,
    )
    return machine_id
