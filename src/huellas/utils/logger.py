"""Logging helpers for huellas.

Every module logs through a child of the ``huellas`` logger. The package
logger carries a NullHandler, so an application that never configures
logging sees nothing, and one that does gets document-pass summaries,
definition counts and duplicate-definition notices at DEBUG.

Example:
    >>> from huellas.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("document pass done")
"""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "huellas"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``huellas`` namespace.

    Args:
        name: Logger name (typically __name__); bare names are prefixed

    Example:
        >>> get_logger("document").name
        'huellas.document'
    """
    if not (name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}.")):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def enable_debug_logging(stream_handler: logging.Handler | None = None) -> logging.Handler:
    """Send huellas DEBUG records to a handler (stderr by default).

    Returns the attached handler so callers can remove it again.
    """
    handler = stream_handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(name)s %(levelname)s: %(message)s"))
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return handler


__all__ = ["ROOT_LOGGER_NAME", "enable_debug_logging", "get_logger"]
