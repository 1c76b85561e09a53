"""
Concurrent latency probing for RelayPing.

Every selected relay gets its own asyncio task. Task ``i`` sleeps
``(i + 1) * stagger_ms`` before spawning its echo probe so that launches are
spread out instead of hitting the network stack at once. The batch only
completes once every task has settled; a failing probe is recorded as a
``Failure`` and never cancels its siblings.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from ..core.models import Criteria, Failure, ProbeOutcome, RelayRecord
from .parser import parse


@dataclass(frozen=True)
class ProbeOutput:
    """Decoded output of one echo probe run."""
    stdout: str
    stderr: str


EchoProbe = Callable[[str, int, float], Awaitable[ProbeOutput]]


class PingProbe:
    """Echo probe backed by the system ``ping`` binary."""

    def __init__(self, command: str = "ping", timeout: Optional[float] = None):
        self.command = command
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def build_command(self, address: str, count: int, interval: float) -> List[str]:
        return [self.command, '-c', str(count), '-i', str(interval), address]

    async def __call__(self, address: str, count: int, interval: float) -> ProbeOutput:
        args = self.build_command(address, count, interval)
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return ProbeOutput(stdout='', stderr=f"Failed to run {self.command}: {e}")

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), self.timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            return ProbeOutput(stdout='', stderr=f"timed out after {self.timeout}s")

        return ProbeOutput(
            stdout=stdout.decode(errors='replace'),
            stderr=stderr.decode(errors='replace'),
        )


def stagger_offsets(count: int, step_ms: int) -> List[float]:
    """Launch delay in seconds for each of ``count`` probes."""
    return [(index + 1) * step_ms / 1000.0 for index in range(count)]


class ProbeScheduler:
    """Runs one staggered echo probe per relay and collects every outcome."""

    def __init__(self, probe: Optional[EchoProbe] = None, hostname_suffix: str = ""):
        self.probe = probe or PingProbe()
        self.hostname_suffix = hostname_suffix
        self.logger = logging.getLogger(__name__)

    def run(self, selected: Sequence[RelayRecord], criteria: Criteria) -> List[ProbeOutcome]:
        """Probe all relays and block until every probe has settled."""
        return asyncio.run(self.run_async(selected, criteria))

    async def run_async(self, selected: Sequence[RelayRecord],
                        criteria: Criteria) -> List[ProbeOutcome]:
        """Coroutine form of :meth:`run`. Outcomes follow input order."""
        offsets = stagger_offsets(len(selected), criteria.stagger_ms)
        tasks = [
            asyncio.create_task(self._probe_one(relay, criteria, offset))
            for relay, offset in zip(selected, offsets)
        ]
        outcomes = await asyncio.gather(*tasks)
        self.logger.debug('got results')
        return list(outcomes)

    async def _probe_one(self, relay: RelayRecord, criteria: Criteria,
                         offset: float) -> ProbeOutcome:
        await asyncio.sleep(offset)
        self.logger.debug(f"sending ping to {relay.ipv4_addr_in}")

        try:
            output = await self.probe(relay.ipv4_addr_in, criteria.count, criteria.interval)
        except Exception as e:
            return self._failure(relay, f"probe error: {e}")

        if output.stderr:
            return self._failure(relay, output.stderr)

        measurement = parse(output.stdout, relay, self.hostname_suffix)
        if measurement is None:
            return Failure(
                hostname=relay.hostname,
                diagnostic=f"no output match for {relay.hostname} - {output.stdout}",
            )
        return measurement

    def display_host(self, relay: RelayRecord) -> str:
        if self.hostname_suffix:
            return f"{relay.hostname}.{self.hostname_suffix}"
        return relay.hostname

    def _failure(self, relay: RelayRecord, diagnostic: str) -> Failure:
        self.logger.error(f"{self.display_host(relay)}: {diagnostic.strip()}")
        return Failure(hostname=relay.hostname, diagnostic=diagnostic)
