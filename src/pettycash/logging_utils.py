"""Logging setup for the pettycash command line.

Modules create their own ``logging.getLogger(__name__)`` loggers; this
module only attaches one stderr handler to the ``pettycash`` logger and sets
its level. Calling ``configure_logging`` again changes the level without
adding another handler.
"""

import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "PETTYCASH_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

_HANDLER_NAME = "pettycash-stderr"


def resolve_level(level: Optional[str | int] = None) -> int:
    """Turn a level name or number into a logging level.

    Falls back to PETTYCASH_LOG_LEVEL, then WARNING.

    Raises:
        ValueError: If the level name is unknown
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{level}'")
    return value


def configure_logging(level: Optional[str | int] = None) -> logging.Logger:
    """Configure the package logger once and return it."""
    logger = logging.getLogger("pettycash")
    logger.setLevel(resolve_level(level))

    for handler in logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            # stderr may have been swapped since the last call
            handler.stream = sys.stderr
            return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger
