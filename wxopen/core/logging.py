"""
Logging utilities for the client SDK and its command line helpers.

Provides a consistent logging format and configuration.
"""

import logging
import sys

# httpx logs every request URL at INFO; WeChat access tokens travel in the query.
_TOKEN_LEAKING_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging and keep HTTP client loggers at WARNING or above."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    floor = max(logging.getLevelName(level.upper()), logging.WARNING)
    for name in _TOKEN_LEAKING_LOGGERS:
        logging.getLogger(name).setLevel(floor)


__all__ = ["configure_logging"]
