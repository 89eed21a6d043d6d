"""Logging helpers: every appstager logger lives under the ``appstager`` name."""

from __future__ import annotations

import logging

_LOGGER_NAME = "appstager"
_FORMAT = "[appstager] %(levelname)s %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``appstager.<name>``, or the root appstager logger."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Send appstager records to stderr, at DEBUG when ``verbose``.

    Stdout stays free for the staged manifest path. Calling this again
    replaces the previous handler instead of stacking another one.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
