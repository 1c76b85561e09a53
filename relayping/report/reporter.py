"""
Result reporting for RelayPing.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.models import Measurement

logger = logging.getLogger(__name__)


@dataclass
class Report:
    """Final outcome of a run."""
    results: List[Measurement] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.results)

    @property
    def top_hostname(self) -> Optional[str]:
        """Best relay, for scripting use."""
        return self.results[0].hostname if self.results else None


def format_measurement(measurement: Measurement, hostname_suffix: str = "") -> str:
    host = measurement.hostname
    if hostname_suffix:
        host = f"{host}.{hostname_suffix}"
    return (
        f" - {host} ({measurement.avg:.1f}ms) {measurement.network_port_speed} Gigabit "
        f"{measurement.type} {measurement.city}, {measurement.country}"
    )


def render_report(report: Report, hostname_suffix: str = "") -> None:
    """Emit the report through logging.

    The ranked table is diagnostic output; only the top hostname is printed at
    INFO so it is the sole line on stdout in pipe mode.
    """
    if not report.found:
        logger.error("No servers found")
        return

    logger.debug('\n\n')
    logger.debug(f"Top {len(report.results)} results:")
    for measurement in report.results:
        logger.debug(format_measurement(measurement, hostname_suffix))
    logger.debug('')
    logger.info(report.top_hostname)
