"""Minimal logging utilities for chatmark.

Provides a simple get_logger function that wraps the standard library logging.
The library never installs handlers; configure logging in the application.

Example:
    >>> from chatmark.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Rendering message")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "chatmark." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'chatmark.mymodule'
    """
    if not (name == "chatmark" or name.startswith("chatmark.")):
        name = f"chatmark.{name}"
    return logging.getLogger(name)
