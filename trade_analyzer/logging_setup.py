"""Logging configuration for scripts that drive the analyzer."""
import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def teardown_logging(logger: Optional[logging.Logger] = None) -> None:
    """Flush, detach, and close all handlers from the provided logger."""
    target = logger or logging.getLogger()
    for handler in list(target.handlers):
        target.removeHandler(handler)
        handler.flush()
        handler.close()


def setup_logging(log_level: str = 'INFO', console_output: bool = True) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_output: Whether to output logs to stderr

    Returns:
        Configured root logger
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    teardown_logging(logger)

    if console_output:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    logger.debug("Logging initialized at %s level", log_level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module (typically __name__)."""
    return logging.getLogger(name)
