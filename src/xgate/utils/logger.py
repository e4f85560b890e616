"""SDK logging setup"""

import logging
import sys
from typing import Optional

from xgate.config.xgate_config import XGateConfig

LOGGER_NAME = "xgate"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Marks handlers installed by configure_logging so reconfiguring replaces them
_HANDLER_ATTR = "_xgate_handler"


def configure_logging(config: XGateConfig) -> logging.Logger:
    """
    Attach a handler to the ``xgate`` logger according to the configuration

    DEBUG level when ``config.debug`` is set, INFO otherwise. Logs go to
    ``config.log_file`` when given, stderr otherwise. Calling again replaces
    the handler installed by the previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            logger.removeHandler(handler)
            handler.close()

    handler: logging.Handler
    if config.log_file:
        handler = logging.FileHandler(config.log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)

    setattr(handler, _HANDLER_ATTR, True)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if config.debug else logging.INFO)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the SDK logger or one of its children"""
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
