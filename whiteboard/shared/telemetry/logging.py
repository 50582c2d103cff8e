"""Logging configuration for the sync client."""

import logging
import sys

from whiteboard.core.config import get_settings

# Libraries that log every request at INFO; the transport logs its own summary.
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging() -> None:
    """Configure root logging to stdout.

    DEBUG when settings.debug is True, otherwise INFO. HTTP client
    loggers stay at WARNING unless debugging.
    """
    debug = get_settings().debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)
