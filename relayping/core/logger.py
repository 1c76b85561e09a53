"""
Logging configuration for RelayPing.

Two output modes are supported. Pipe mode prints bare messages so the top
hostname can be consumed by other programs; debug mode prints every diagnostic
event with a timestamped format. In both modes errors go to stderr.
"""

import logging
import logging.handlers
import sys
from pathlib import Path

from .config import LoggingConfig


class _BelowLevelFilter(logging.Filter):
    """Pass only records below a given level."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def setup_logging(config: LoggingConfig, debug: bool = False) -> None:
    """Setup logging configuration.

    The console level follows the output mode only: INFO in pipe mode, DEBUG in
    debug mode. ``config.level`` applies to the log file.
    """
    if debug:
        level = logging.DEBUG
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        level = logging.INFO
        formatter = logging.Formatter('%(message)s')

    # Setup root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.addFilter(_BelowLevelFilter(logging.ERROR))
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(max(level, logging.ERROR))
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    # File handler (if configured)
    if config.file:
        try:
            log_path = Path(config.file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=config.max_size * 1024 * 1024,  # Convert MB to bytes
                backupCount=config.backup_count
            )
            file_level = getattr(logging, config.level.upper(), logging.DEBUG)
            file_handler.setLevel(file_level)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            root_logger.addHandler(file_handler)
            root_logger.setLevel(min(level, file_handler.level))

        except OSError as e:
            logging.warning(f"Failed to setup file logging: {e}")

    logging.getLogger('relayping').setLevel(root_logger.level)

    # Reduce noise from third-party libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

