"""Logging for homeops.

Modules log through ``get_logger(__name__)``; the CLI attaches the stderr
handler and sets the level from ``Settings.log_level`` (``HOMEOPS_LOG_LEVEL``).
"""

import logging
import sys

ROOT_LOGGER_NAME = "homeops"

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"


def parse_level(name: str | None, default: int = logging.WARNING) -> int:
    """Map a level name such as ``"debug"`` to its ``logging`` constant."""
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(level: str | None = None) -> None:
    """Set the ``homeops`` log level, adding the stderr handler on first use."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)
        root_logger.propagate = False
    root_logger.setLevel(parse_level(level))


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the ``homeops`` namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
