"""
Logging for the ip6text package.

All module loggers hang below the ``ip6text`` logger, which owns the single
rich handler. Default level is WARNING so library callers see nothing.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["get_logger", "set_log_level"]

PACKAGE_LOGGER = "ip6text"


def _package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)

    # Prevent adding duplicate handlers
    if logger.handlers:
        return logger

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.WARNING)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` (typically __name__ of the calling module)."""
    _package_logger()
    return logging.getLogger(name)


def set_log_level(log_level: str):
    _package_logger().setLevel(getattr(logging, log_level.upper()))
