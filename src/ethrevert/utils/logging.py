"""
Structured logging helpers for ethrevert.

Modules obtain their logger with ``get_logger(__name__)`` and attach
context through ``extra={...}``. The package logger carries a
NullHandler so nothing is emitted unless the application configures
logging.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

ROOT_LOGGER_NAME = "ethrevert"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger inside the ethrevert namespace.

    Args:
        name: Module name (usually ``__name__``)

    Returns:
        Logger instance
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_level(level: Union[int, str]) -> None:
    """Set the level of the package logger."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Attach a handler to the package logger.

    Calling this more than once replaces the previously configured handler.

    Args:
        level: Log level for the package logger
        fmt: Format string for the handler
        handler: Handler to attach (defaults to a StreamHandler)

    Returns:
        The package logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(logger.handlers):
        if getattr(existing, "_ethrevert_configured", False):
            logger.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler._ethrevert_configured = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
