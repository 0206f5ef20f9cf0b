"""Tests for the application logging setup."""

import logging

import logging_config
from logging_config import setup_logging


def test_setup_adds_a_single_handler(monkeypatch):
    root_logger = logging.getLogger()
    monkeypatch.setattr(logging_config, "_logging_initialized", False)
    monkeypatch.setattr(root_logger, "handlers", list(root_logger.handlers))
    previous_level = root_logger.level
    handler_count = len(root_logger.handlers)

    try:
        setup_logging(logging.DEBUG)
        setup_logging(logging.WARNING)

        assert len(root_logger.handlers) == handler_count + 1
        assert root_logger.level == logging.WARNING
    finally:
        root_logger.setLevel(previous_level)
