"""Console logging setup for the metalrates package."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Attach a single stderr handler to the ``metalrates`` logger.

    Safe to call more than once: the handler is only installed the first time,
    later calls just adjust the level.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger("metalrates")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
        logger.addHandler(handler)

    return logger
