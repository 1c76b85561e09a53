"""Test configuration for RelayPing."""

import pytest

from relayping.core.models import Criteria, RelayRecord


def make_relay(hostname, **overrides):
    data = dict(
        hostname=hostname,
        country_code="ch",
        country_name="Switzerland",
        city_code="zrh",
        city_name="Zurich",
        active=True,
        owned=True,
        provider="M247",
        ipv4_addr_in="10.0.0.1",
        ipv6_addr_in="",
        network_port_speed=10,
        stboot=True,
        type="wireguard",
    )
    data.update(overrides)
    return RelayRecord(**data)


@pytest.fixture
def relay_factory():
    """Build relay records with sensible defaults."""
    return make_relay


@pytest.fixture
def catalog():
    """A small mixed relay catalog."""
    return [
        make_relay("ch-zrh-wg-001", ipv4_addr_in="10.0.0.1"),
        make_relay("ch-zrh-wg-002", ipv4_addr_in="10.0.0.2", stboot=False,
                   network_port_speed=1),
        make_relay("de-fra-wg-001", ipv4_addr_in="10.0.1.1", country_code="de",
                   country_name="Germany", city_name="Frankfurt", provider="xtom"),
        make_relay("de-ber-wg-001", ipv4_addr_in="10.0.1.2", country_code="de",
                   country_name="Germany", city_name="Berlin", owned=False,
                   provider="DataPacket", network_port_speed=20),
        make_relay("se-sto-wg-001", ipv4_addr_in="10.0.2.1", country_code="se",
                   country_name="Sweden", city_name="Stockholm", stboot=False),
    ]


@pytest.fixture
def open_criteria():
    """Criteria that match every relay."""
    return Criteria(country=None, port_speed=0, stagger_ms=0)


PING_OUTPUT = """PING {ip} ({ip}) 56(84) bytes of data.
64 bytes from {ip}: icmp_seq=1 ttl=55 time={avg} ms
64 bytes from {ip}: icmp_seq=2 ttl=55 time={avg} ms

--- {ip} ping statistics ---
2 packets transmitted, 2 received, 0% packet loss, time 201ms
rtt min/avg/max/mdev = {min}/{avg}/{max}/0.120 ms
"""


def ping_output(ip, avg, spread=0.5):
    """Linux ping output with the given average."""
    return PING_OUTPUT.format(ip=ip, avg=f"{avg:.3f}", min=f"{max(avg - spread, 0):.3f}",
                              max=f"{avg + spread:.3f}")
