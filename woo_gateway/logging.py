"""Stdout logging shared by the gateway process and the check command.

Secrets never reach a log record: handlers log method, endpoint and status only.
"""

import logging
import sys

from .config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Loggers that are too chatty at the configured level
NOISY_LOGGERS = ("aiohttp.access",)


def setup_logging(level: int | str | None = None) -> None:
    """
    Route every record to a single stdout handler.

    Args:
        level: Logging level; LOG_LEVEL from the gateway settings when omitted
    """
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = level.upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger, typically ``get_logger(__name__)``."""
    return logging.getLogger(name)
