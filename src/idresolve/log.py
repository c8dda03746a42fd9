"""Logging setup for library and script use."""

from __future__ import annotations

import logging

LOGGER_NAME = "idresolve"
LOG_FORMAT = "%(asctime)s [idresolve] %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Calling this more than once replaces the previous handler rather than
    stacking another one.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    for handler in list(logger.handlers):
        if getattr(handler, "_idresolve", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._idresolve = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
    return logger
