"""
Logger configuration.

Console logging with ISO timestamps for the API process.
"""

import logging
import sys

from learnhub import config


def configure_logging(level: str = None) -> None:
    """Configure root logging once at application startup."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel((level or config.LOG_LEVEL).upper())
    root_logger.addHandler(handler)

    # Driver heartbeats are noisy at INFO
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
