"""
Logging for the storefront package.

Every module logs through the "storefront" logger namespace:

    from storefront.logging import get_logger
    logger = get_logger(__name__)

A stdout handler is attached to that namespace on import unless the host
application already gave it one, so embedding apps keep control of the root
logger.
"""

import logging
import os
import sys
from functools import cache

PACKAGE_LOGGER = "storefront"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Device builds log to a console that already timestamps lines
LOG_FORMAT_COMPACT = "%(levelname)s %(name)s: %(message)s"

# Control characters that would let a product field forge log lines (CWE-117)
_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach the stdout handler to the package logger (once)."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    package_logger.setLevel(getattr(logging, level_name, logging.INFO))

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        compact = os.environ.get("STOREFRONT_ENV") == "production"
        handler.setFormatter(logging.Formatter(LOG_FORMAT_COMPACT if compact else LOG_FORMAT))
        package_logger.addHandler(handler)

    # Catalog fetches go through httpx; its per-request INFO lines are noise here
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    return package_logger


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    """Logger for a storefront module (names outside the package are nested under it)."""
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def sanitize_string_for_logging(value: object | None, max_length: int = 50) -> str:
    """Escape control characters and cap length; "N/A" for empty values."""
    if value is None or value == "":
        return "N/A"
    text = str(value).translate(_ESCAPES)
    return text if len(text) <= max_length else text[:max_length] + "..."


def sanitize_id_for_logging(id_value: object | None) -> str:
    """Product/line ids are logged as their first 8 characters."""
    if id_value is None or id_value == "":
        return "N/A"
    return str(id_value).translate(_ESCAPES)[:8]


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_COMPACT",
    "PACKAGE_LOGGER",
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
