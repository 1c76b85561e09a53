#!/usr/bin/env python3
"""
RelayPing - find the lowest-latency VPN relays.
Command line entry point: fetch the relay directory, probe matching relays and
print the fastest one.
"""

import logging
import signal
import sys
from pathlib import Path
from typing import Optional

import click

from relayping.core.config import Config, LoggingConfig
from relayping.core.logger import setup_logging
from relayping.core.models import Criteria, RelayType, RunMode
from relayping.directory.relay_directory import DirectoryError, RelayDirectory, list_countries
from relayping.probe.candidate_filter import select
from relayping.probe.ranker import rank
from relayping.probe.scheduler import PingProbe, ProbeScheduler
from relayping.report.reporter import Report, render_report


def signal_handler(signum, frame):
    """Handle shutdown signals gracefully."""
    logging.info(f"Received signal {signum}, shutting down...")
    sys.exit(0)


@click.command()
@click.option('--config', '-c', 'config_file', type=click.Path(dir_okay=False),
              help='Configuration file path')
@click.option('--country', help='The country you want to query (eg. us, gb, de)')
@click.option('--list-countries', is_flag=True, help='List the available countries')
@click.option('--type', 'relay_type',
              type=click.Choice([t.value for t in RelayType], case_sensitive=False),
              help='The type of server to query')
@click.option('--count', type=int, help='The number of pings to the server (default 3)')
@click.option('--interval', type=float,
              help='The interval between pings in seconds (default/min 0.2)')
@click.option('--top', type=int, help='The number of top servers to show (0=all)')
@click.option('--port-speed', type=int,
              help='Only show servers with at least n Gigabit port speed')
@click.option('--provider', help='Only show servers from the given provider')
@click.option('--owned', type=click.Choice(['true', 'false'], case_sensitive=False),
              help='Only show servers owned by the VPN operator')
@click.option('--run-mode',
              type=click.Choice([m.value for m in RunMode], case_sensitive=False),
              help='Only show servers running from ram, disk or all')
@click.option('--stagger', type=int, help='Delay step between probe launches in ms')
@click.option('--timeout', type=float, help='Per-probe timeout in seconds')
@click.option('--debug', is_flag=True, help='Enable diagnostic logging')
def main(config_file: Optional[str], country: Optional[str], list_countries: bool,
         relay_type: Optional[str], count: Optional[int], interval: Optional[float],
         top: Optional[int], port_speed: Optional[int], provider: Optional[str],
         owned: Optional[str], run_mode: Optional[str], stagger: Optional[int],
         timeout: Optional[float], debug: bool):
    """RelayPing - find the lowest-latency VPN relays"""

    # Setup signal handlers
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                click.echo(f"Error: Configuration file {config_file} not found", err=True)
                sys.exit(1)
            cfg = Config.from_file(config_path)
        else:
            cfg = Config.default()

        cfg = cfg.with_overrides(
            directory_relay_type=relay_type,
            filter_country=country,
            filter_port_speed=port_speed,
            filter_run_mode=run_mode,
            filter_provider=provider,
            filter_owned=owned,
            probe_count=count,
            probe_interval=interval,
            probe_stagger_ms=stagger,
            probe_timeout=timeout,
            report_top=top,
        )

        # console logging first so configuration errors are reported
        setup_logging(LoggingConfig(), debug)
        criteria = cfg.criteria()
        setup_logging(cfg.logging, debug)

        directory = RelayDirectory(cfg.directory)
        relays = directory.fetch(criteria.relay_type.value)

        if list_countries:
            run_list_countries(relays)
        else:
            report = run_probe(cfg, criteria, relays)
            if not report.found:
                sys.exit(1)

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        sys.exit(0)
    except (ValueError, DirectoryError) as e:
        logging.error(f"Fatal error: {e}")
        if debug:
            logging.exception("Full traceback:")
        sys.exit(1)


def run_list_countries(relays) -> None:
    """Print every country that has at least one relay."""
    for label in list_countries(relays):
        logging.info(label)


def run_probe(config: Config, criteria: Criteria, relays) -> Report:
    """Select, probe and rank relays, then emit the report."""
    selected = select(relays, criteria)
    logging.debug(f"Probing {len(selected)} of {len(relays)} relays")

    scheduler = ProbeScheduler(
        probe=PingProbe(config.probe.command, config.probe.timeout),
        hostname_suffix=config.directory.hostname_suffix,
    )
    outcomes = scheduler.run(selected, criteria) if selected else []

    report = Report(results=rank(outcomes, config.report.top))
    logging.debug(f"got top {config.report.top}")
    render_report(report, config.directory.hostname_suffix)
    return report


if __name__ == '__main__':
    main()
