from __future__ import annotations

import logging
import sys
from typing import Final, TextIO

LOGGER_NAME: Final[str] = "runetally"
LOG_FORMAT: Final[str] = "[%(asctime)s] %(levelname)-7s [%(name)s] %(message)s"
DATE_FORMAT: Final[str] = "%H:%M:%S"

_HANDLER_ATTR = "_runetally_handler"


def configure_logging(level: int | str = logging.WARNING, *, stream: TextIO | None = None) -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Calling it again replaces the handler instead of stacking another one.
    """

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    setattr(handler, _HANDLER_ATTR, True)
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
