"""Centralized logging configuration for the tile grid collapse application.

Usage:
    from logging_config import setup_logging
    setup_logging()  # Call once at startup

Model and view loggers are named after their modules ('model.solver', 'view.main_window', ...) and all propagate to
the root logger configured here.
"""

import logging
import sys

import constants


_logging_initialized = False


def setup_logging(log_level: int = logging.INFO) -> None:
    """Configures console logging for the application.

    Calling this more than once only updates the log level.

    Args:
        log_level: Level for console output. Defaults to logging.INFO.
    """
    global _logging_initialized

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if _logging_initialized:
        return

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(fmt=constants.LOG_FORMAT, datefmt=constants.LOG_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    _logging_initialized = True
