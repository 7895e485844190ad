#!/usr/bin/env python3
"""
Logging setup for the viewer.

Configures a dedicated "npendulum" logger (not the root logger) so records
from pygame, Dear PyGui or urllib3 do not end up in the application log.
Modules log through logging.getLogger("npendulum.<module>").
"""
import logging
import os
from typing import Optional

from .constants import LOG_FORMAT, LOGGER_NAME


def setup_logging(level: str = "INFO", fmt: str = LOG_FORMAT, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach a console handler, and a file handler when `log_file` is given, to the
    application logger. Safe to call more than once.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    formatter = logging.Formatter(fmt)

    # Clear existing handlers to avoid duplication if this function is called again
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized at %s%s", level, f", file {log_file}" if log_file else "")
    return logger
