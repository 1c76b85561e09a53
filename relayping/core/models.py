"""
Data model for RelayPing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class RelayType(Enum):
    """Relay types served by the directory."""
    OPENVPN = "openvpn"
    BRIDGE = "bridge"
    WIREGUARD = "wireguard"
    ALL = "all"


class RunMode(Enum):
    """Boot medium selector."""
    ALL = "all"
    RAM = "ram"
    DISK = "disk"


@dataclass(frozen=True)
class RelayRecord:
    """A single relay as listed by the directory."""
    hostname: str
    country_code: str
    country_name: str
    city_code: str
    city_name: str
    active: bool
    owned: bool
    provider: str
    ipv4_addr_in: str
    ipv6_addr_in: str
    network_port_speed: int
    stboot: bool  # True when the relay runs from RAM
    type: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RelayRecord':
        """Build a record from a directory JSON object."""
        try:
            return cls(
                hostname=data['hostname'],
                country_code=data.get('country_code', ''),
                country_name=data.get('country_name', ''),
                city_code=data.get('city_code', ''),
                city_name=data.get('city_name', ''),
                active=bool(data.get('active', False)),
                owned=bool(data.get('owned', False)),
                provider=data.get('provider', ''),
                ipv4_addr_in=data['ipv4_addr_in'],
                ipv6_addr_in=data.get('ipv6_addr_in') or '',
                network_port_speed=int(data.get('network_port_speed') or 0),
                stboot=bool(data.get('stboot', False)),
                type=data.get('type', ''),
            )
        except KeyError as e:
            raise ValueError(f"Relay entry is missing required field: {e}")


@dataclass(frozen=True)
class Criteria:
    """Selection and probing parameters for one run."""
    country: Optional[str] = None
    port_speed: int = 0
    run_mode: RunMode = RunMode.ALL
    provider: Optional[str] = None
    owned: Optional[bool] = None
    relay_type: RelayType = RelayType.WIREGUARD
    count: int = 3
    interval: float = 0.2
    stagger_ms: int = 10


@dataclass(frozen=True)
class PingStatistics:
    """Round-trip summary reported by the echo probe, in milliseconds."""
    min: float
    avg: float
    max: float
    mdev: float
    summary: str


@dataclass(frozen=True)
class Measurement:
    """Successful latency measurement for one relay."""
    hostname: str
    city: str
    country: str
    type: str
    ip: str
    avg: float
    network_port_speed: int


@dataclass(frozen=True)
class Failure:
    """A probe that produced no usable measurement."""
    hostname: str
    diagnostic: str


ProbeOutcome = Union[Measurement, Failure]
