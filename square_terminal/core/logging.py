"""Process-wide logging setup."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("square_terminal").setLevel(resolved)
    # httpx logs every request line at INFO, including OAuth query strings.
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["configure_logging"]
