from __future__ import annotations

import logging
import os

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

# Third-party loggers that drown out per-page crawl output at DEBUG.
_NOISY_LOGGERS = ("aiohttp.access", "aiohttp.client", "charset_normalizer")


def setup_logging(level: str | int | None = None) -> None:
    """
    Configure process logging for the command line.
    Level comes from the argument, then SITECRAWLER_LOG_LEVEL, then INFO.
    Library code never calls this; the engine takes a logger instead.
    """
    if level is None:
        level = os.getenv("SITECRAWLER_LOG_LEVEL", "INFO")

    if isinstance(level, str):
        level = _LEVELS.get(level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
