"""
Candidate selection for RelayPing.
"""

from typing import Iterable, List

from ..core.models import Criteria, RelayRecord, RunMode


def matches_run_mode(stboot: bool, run_mode: RunMode) -> bool:
    """Check a relay's boot medium against the requested run mode."""
    if run_mode == RunMode.ALL:
        return True
    if run_mode == RunMode.RAM:
        return stboot
    if run_mode == RunMode.DISK:
        return not stboot
    return False


def matches(relay: RelayRecord, criteria: Criteria) -> bool:
    """Return True when the relay satisfies every criterion."""
    return (
        (criteria.country is None or criteria.country == relay.country_code)
        and relay.network_port_speed >= criteria.port_speed
        and matches_run_mode(relay.stboot, criteria.run_mode)
        and (criteria.provider is None or criteria.provider == relay.provider)
        and (criteria.owned is None or criteria.owned == relay.owned)
    )


def select(catalog: Iterable[RelayRecord], criteria: Criteria) -> List[RelayRecord]:
    """Relays to probe, in catalog order."""
    return [relay for relay in catalog if matches(relay, criteria)]
