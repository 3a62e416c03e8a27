"""Logging utilities for cwupload modules."""

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.

    The logger propagates to the root logger, so basicConfig() is enough
    to see its output. A default level is only set while the root logger
    has no handlers.

    Args:
        name: Logger name (typically 'cwupload.<area>')

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logger.setLevel(logging.WARNING)

    return logger
