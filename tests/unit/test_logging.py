"""Tests for logging configuration."""

import logging

import pytest

from gradlefix.logging import LOGGER_NAME, get_logger, resolve_level, setup_logging


class TestResolveLevel:
    """Test log level selection."""

    def test_flags(self):
        assert resolve_level() == logging.INFO
        assert resolve_level(verbose=True) == logging.DEBUG
        assert resolve_level(quiet=True) == logging.WARNING

    def test_explicit_level_wins(self):
        assert resolve_level(verbose=True, log_level="error") == logging.ERROR

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_level(log_level="loud")


class TestSetupLogging:
    """Test handler installation."""

    def teardown_method(self):
        setup_logging()

    def test_single_handler_without_markup(self):
        setup_logging(verbose=True)
        setup_logging(verbose=True)
        logger = logging.getLogger(LOGGER_NAME)
        assert len(logger.handlers) == 1
        assert logger.handlers[0].markup is False
        assert logger.level == logging.DEBUG
        assert not logger.propagate

    def test_http_loggers_follow_debug_only(self):
        setup_logging()
        assert logging.getLogger("httpx").level == logging.WARNING
        setup_logging(verbose=True)
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_get_logger_namespacing(self):
        assert get_logger("gradlefix.paste").name == "gradlefix.paste"
        assert get_logger("apps.cli").name == "gradlefix.apps.cli"
