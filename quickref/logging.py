"""Logging configuration for the quickref CLI."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "WARNING") -> None:
    """Configure package-wide logging.

    Output goes to stderr so that stdout stays clean for results.

    Args:
        level: Logging level name, e.g. "DEBUG" or "WARNING".
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )

