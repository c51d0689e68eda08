"""
Logging setup for the image bot service.

The launcher calls configure_logging() once and passes the returned logger
(or children of it) into the components that need one.
"""

import logging
from typing import Optional

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s: %(message)s"
ROOT_LOGGER_NAME = "image_bot"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_log_level(level_name: Optional[str]) -> int:
    """Map a LOG_LEVEL value to a logging level. Unknown or empty -> INFO."""
    if not level_name:
        return logging.INFO
    return LOG_LEVELS.get(level_name.strip().lower(), logging.INFO)


def configure_logging(
    level_name: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Configure and return the service logger.

    Safe to call more than once; previous handlers installed here are replaced.

    Args:
        level_name: LOG_LEVEL value (debug, info, warn, error)
        handler: Handler to attach (default: stderr stream handler)

    Returns:
        The "image_bot" logger
    """
    service_logger = logging.getLogger(ROOT_LOGGER_NAME)
    service_logger.setLevel(parse_log_level(level_name))

    for existing in list(service_logger.handlers):
        service_logger.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    service_logger.addHandler(handler)
    service_logger.propagate = False

    return service_logger
