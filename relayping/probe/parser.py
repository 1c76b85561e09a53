"""
Echo probe output parsing for RelayPing.
"""

import logging
import re
from typing import Optional

from ..core.models import Measurement, PingStatistics, RelayRecord

logger = logging.getLogger(__name__)

# e.g. "rtt min/avg/max/mdev = 12.1/13.4/15.0/1.2 ms"
_NUMBER = r'\d+(?:\.\d+)?'
STATS_PATTERN = re.compile(
    rf'(?P<min>{_NUMBER})/(?P<avg>{_NUMBER})/(?P<max>{_NUMBER})/(?P<mdev>{_NUMBER})'
)


def parse_statistics(output: str) -> Optional[PingStatistics]:
    """Extract the min/avg/max/mdev summary from raw probe output."""
    match = STATS_PATTERN.search(output)
    if not match:
        return None

    values = {}
    for name in ('min', 'avg', 'max', 'mdev'):
        try:
            values[name] = float(match.group(name))
        except ValueError:
            logger.warning(f"Unparseable {name} value {match.group(name)!r}, using 0")
            values[name] = 0.0

    return PingStatistics(summary=match.group(0), **values)


def parse(output: str, relay: RelayRecord, hostname_suffix: str = "") -> Optional[Measurement]:
    """Turn raw probe output into a measurement for the given relay."""
    host = f"{relay.hostname}.{hostname_suffix}" if hostname_suffix else relay.hostname

    stats = parse_statistics(output)
    if stats is None:
        logger.error(f"no output match for {host} - {output}")
        return None

    logger.debug(f"Pinged {host}, min/avg/max/mdev {stats.summary}")
    return Measurement(
        hostname=relay.hostname,
        city=relay.city_name,
        country=relay.country_name,
        type=relay.type,
        ip=relay.ipv4_addr_in,
        avg=stats.avg,
        network_port_speed=relay.network_port_speed,
    )
