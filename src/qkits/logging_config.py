"""Logging setup for applications embedding the simulator."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "WARNING", fmt: str = LOG_FORMAT) -> logging.Logger:
    """
    Attach a stream handler to the ``qkits`` logger.

    Parameters
    ----------
    level : str
        Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    fmt : str
        ``logging.Formatter`` format string.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    logger = logging.getLogger("qkits")
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(numeric)

    # Repeated calls reconfigure instead of stacking handlers
    for handler in list(logger.handlers):
        if getattr(handler, "_qkits_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(fmt))
    handler._qkits_handler = True
    logger.addHandler(handler)
    return logger
