"""Minimal logging utilities for splicer.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from splicer.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Scanning buffer")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "splicer." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'splicer.mymodule'
    """
    if not (name == "splicer" or name.startswith("splicer.")):
        name = f"splicer.{name}"
    return logging.getLogger(name)
