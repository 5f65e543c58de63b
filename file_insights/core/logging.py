"""
Logging utilities for the FastAPI application and operator scripts.

Provides a consistent logging format and configuration.
"""

import logging
import sys

# pypdf reports every recoverable structural defect it repairs while reading.
_QUIET_LOGGERS: dict[str, int] = {
    "pypdf": logging.ERROR,
    "httpx": logging.WARNING,
}


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


__all__ = ["configure_logging"]
