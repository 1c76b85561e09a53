"""
Ranking of probe outcomes.
"""

from typing import Iterable, List

from ..core.models import Measurement, ProbeOutcome


def rank(outcomes: Iterable[ProbeOutcome], top: int = 0) -> List[Measurement]:
    """Successful measurements, fastest first, truncated to ``top`` (0 keeps all).

    Failures are dropped. Ties keep their input order.
    """
    results = sorted(
        (outcome for outcome in outcomes if isinstance(outcome, Measurement)),
        key=lambda m: m.avg,
    )
    return results if top == 0 else results[:top]
