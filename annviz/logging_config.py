"""
Logging setup for applications and example scripts.

Library modules only create loggers with logging.getLogger(__name__).
Nothing is configured on import; call setup_logging() from the entry point.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "annviz"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route the 'annviz' logger to stdout and, optionally, a file.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Logging level for the logger and its handlers
        log_file: Optional path; the file is overwritten

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
