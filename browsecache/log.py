"""Logging helpers for browsecache."""

from __future__ import annotations

import logging

_LOGGER_NAME = "browsecache"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``browsecache`` hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Library code only emits records; the CLI is the one caller that installs
    handlers. Re-running replaces the previous handler instead of stacking.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[browsecache] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
