"""
Relay directory client for RelayPing.
Fetches the list of currently available relays.
"""

import logging
from typing import List, Optional

import requests

from ..core.config import DirectoryConfig
from ..core.models import RelayRecord


class DirectoryError(Exception):
    """The relay directory could not be fetched or understood."""


class RelayDirectory:
    """Fetches relay records from the directory service."""

    def __init__(self, config: DirectoryConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self._session = session or requests.Session()

    def endpoint(self, relay_type: str) -> str:
        return f"{self.config.url.rstrip('/')}/{relay_type}/"

    def fetch(self, relay_type: Optional[str] = None) -> List[RelayRecord]:
        """Fetch the relay catalog for one relay type."""
        url = self.endpoint(relay_type or self.config.relay_type)
        self.logger.debug("Fetching currently available relays...")

        try:
            response = self._session.get(url, timeout=self.config.timeout)
            response.raise_for_status()
            entries = response.json()
        except requests.RequestException as e:
            raise DirectoryError(f"Failed to fetch relays from {url}: {e}")
        except ValueError as e:
            raise DirectoryError(f"Relay directory returned invalid JSON: {e}")

        if not isinstance(entries, list):
            raise DirectoryError(f"Unexpected relay directory payload: {type(entries).__name__}")

        try:
            relays = [RelayRecord.from_dict(entry) for entry in entries]
        except (ValueError, TypeError, AttributeError) as e:
            raise DirectoryError(f"Malformed relay entry: {e}")

        self.logger.debug(f"Fetched {len(relays)} relays from {url}")
        return relays


def list_countries(relays: List[RelayRecord]) -> List[str]:
    """Unique ``code - name`` country labels in first-seen order."""
    countries = {}
    for relay in relays:
        countries.setdefault(f"{relay.country_code} - {relay.country_name}", None)
    return list(countries)
