"""
Configuration management for RelayPing.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from .models import Criteria, RelayType, RunMode

MIN_INTERVAL = 0.2


@dataclass
class DirectoryConfig:
    """Relay directory settings."""
    url: str = "https://api.mullvad.net/www/relays"
    relay_type: str = "wireguard"
    timeout: float = 10.0
    hostname_suffix: str = "mullvad.net"


@dataclass
class FilterConfig:
    """Candidate selection settings."""
    country: Optional[str] = "ch"
    port_speed: int = 0
    run_mode: str = "all"
    provider: Optional[str] = None
    owned: Optional[str] = None


@dataclass
class ProbeConfig:
    """Echo probe settings."""
    command: str = "ping"
    count: int = 3
    interval: float = MIN_INTERVAL
    stagger_ms: int = 10
    timeout: Optional[float] = None


@dataclass
class ReportConfig:
    """Report settings."""
    top: int = 5


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    file: str = ""
    max_size: int = 10
    backup_count: int = 3


def parse_owned(value: Any) -> Optional[bool]:
    """Turn an owned setting into a tri-state flag."""
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError("Invalid value for owned, must be true or false")


def _section(cls, data: Dict[str, Any]):
    known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
    return cls(**known)


# (section, field, accepted types, may be unset)
_FIELD_TYPES = (
    ('directory', 'url', (str,), False),
    ('directory', 'relay_type', (str,), False),
    ('directory', 'timeout', (int, float), False),
    ('directory', 'hostname_suffix', (str,), False),
    ('filter', 'country', (str,), True),
    ('filter', 'port_speed', (int,), False),
    ('filter', 'run_mode', (str,), False),
    ('filter', 'provider', (str,), True),
    ('filter', 'owned', (str, bool), True),
    ('probe', 'command', (str,), False),
    ('probe', 'count', (int,), False),
    ('probe', 'interval', (int, float), False),
    ('probe', 'stagger_ms', (int,), False),
    ('probe', 'timeout', (int, float), True),
    ('report', 'top', (int,), False),
    ('logging', 'level', (str,), False),
    ('logging', 'file', (str,), False),
    ('logging', 'max_size', (int,), False),
    ('logging', 'backup_count', (int,), False),
)


@dataclass
class Config:
    """Main configuration class."""
    directory: DirectoryConfig = field(default_factory=DirectoryConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def default(cls) -> 'Config':
        return cls()

    @classmethod
    def from_file(cls, config_path: Path) -> 'Config':
        """Load configuration from TOML file. Missing keys keep their defaults."""
        try:
            config_data = toml.load(config_path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ValueError(f"Failed to load configuration: {e}")

        try:
            return cls(
                directory=_section(DirectoryConfig, config_data.get('directory', {})),
                filter=_section(FilterConfig, config_data.get('filter', {})),
                probe=_section(ProbeConfig, config_data.get('probe', {})),
                report=_section(ReportConfig, config_data.get('report', {})),
                logging=_section(LoggingConfig, config_data.get('logging', {})),
            )
        except (TypeError, AttributeError) as e:
            raise ValueError(f"Malformed configuration section: {e}")

    def with_overrides(self, **overrides: Any) -> 'Config':
        """Return a copy with command-line values applied.

        Keys are ``section_field`` (e.g. ``probe_count``); ``None`` values are ignored.
        """
        sections = {name: getattr(self, name) for name in
                    ('directory', 'filter', 'probe', 'report', 'logging')}
        for key, value in overrides.items():
            if value is None:
                continue
            section_name, _, field_name = key.partition('_')
            section = sections.get(section_name)
            if section is None or field_name not in section.__dataclass_fields__:
                raise KeyError(f"Unknown configuration override: {key}")
            sections[section_name] = replace(section, **{field_name: value})
        return Config(**sections)

    def validate(self) -> bool:
        """Validate configuration values."""
        self._check_types()

        relay_types = [t.value for t in RelayType]
        if self.directory.relay_type.lower() not in relay_types:
            raise ValueError(
                f"Invalid type, allowed types are: {', '.join(relay_types)}"
            )

        run_modes = [m.value for m in RunMode]
        if self.filter.run_mode.lower() not in run_modes:
            raise ValueError(
                f"Invalid run-mode, allowed types are: {', '.join(run_modes)}"
            )

        parse_owned(self.filter.owned)

        if self.probe.interval < MIN_INTERVAL:
            raise ValueError(f"Minimum interval value is {MIN_INTERVAL}")

        if self.probe.count < 1:
            raise ValueError("Ping count must be at least 1")

        if self.probe.stagger_ms < 0:
            raise ValueError("Stagger step must not be negative")

        if self.probe.timeout is not None and self.probe.timeout <= 0:
            raise ValueError("Probe timeout must be positive")

        if self.filter.port_speed < 0:
            raise ValueError("Port speed must not be negative")

        if self.report.top < 0:
            raise ValueError("Top must not be negative (0 shows all)")

        return True

    def _check_types(self) -> None:
        """Reject values of the wrong type, e.g. quoted numbers in the TOML file."""
        for section_name, field_name, expected, optional in _FIELD_TYPES:
            value = getattr(getattr(self, section_name), field_name)
            if value is None and optional:
                continue
            # bool is an int subclass but never a valid number here
            if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
                raise ValueError(
                    f"Invalid type for {section_name}.{field_name}: {value!r}"
                )

    def criteria(self) -> Criteria:
        """Build the validated run criteria."""
        self.validate()
        country = self.filter.country.lower() if self.filter.country else None
        return Criteria(
            country=country,
            port_speed=self.filter.port_speed,
            run_mode=RunMode(self.filter.run_mode.lower()),
            provider=self.filter.provider,
            owned=parse_owned(self.filter.owned),
            relay_type=RelayType(self.directory.relay_type.lower()),
            count=self.probe.count,
            interval=self.probe.interval,
            stagger_ms=self.probe.stagger_ms,
        )
