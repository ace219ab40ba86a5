"""Structured logging for dispatch events (subscribe, publish, notify, failures)."""

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def get_logger(name: str, level: Union[int, str, None] = None) -> logging.Logger:
    """Return a logger with a stdout handler attached on first use.

    ``level`` only applies when the logger is configured for the first time or
    when passed explicitly; names such as ``"DEBUG"`` are accepted.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO if level is None else level)
    elif level is not None:
        logger.setLevel(level)
    return logger
