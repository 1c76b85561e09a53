"""
RelayPing - VPN relay latency ranking

Fetches the relay list from the VPN directory, pings every relay that matches
the requested criteria with a staggered concurrent launch, and reports the
lowest-latency relays.
"""

__version__ = "1.0.0"
__author__ = "RelayPing Authors"
__license__ = "MIT"

from .core.config import Config
from .core.logger import setup_logging

__all__ = ["Config", "setup_logging"]
