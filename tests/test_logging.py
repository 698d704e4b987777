"""Tests for sshmux.core.logging - package logger setup."""

import logging

import pytest
from rich.logging import RichHandler

from sshmux.core.exceptions import ConfigError
from sshmux.core.logging import get_logger, setup_logging


@pytest.fixture
def package_logger():
    """The sshmux logger, restored to its pristine state afterwards"""
    logger = logging.getLogger("sshmux")
    paramiko_logger = logging.getLogger("paramiko")
    saved = (logger.level, logger.propagate, paramiko_logger.level)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    level, propagate, paramiko_level = saved
    logger.setLevel(level)
    logger.propagate = propagate
    paramiko_logger.setLevel(paramiko_level)


class TestSetupLogging:
    def test_installs_rich_handler_on_package_logger(self, package_logger):
        root_handlers = list(logging.getLogger().handlers)
        setup_logging("DEBUG", rich_tracebacks=False)

        assert [type(h) for h in package_logger.handlers] == [RichHandler]
        assert package_logger.level == logging.DEBUG
        assert logging.getLogger().handlers == root_handlers

    def test_repeated_calls_replace_handlers(self, package_logger):
        setup_logging("INFO", rich_tracebacks=False)
        setup_logging("WARNING", rich_tracebacks=False)
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.WARNING

    def test_log_file(self, package_logger, tmp_path):
        log_file = tmp_path / "logs" / "sshmux.log"
        setup_logging("INFO", log_file=log_file, rich_tracebacks=False)
        get_logger("sshmux.domain.mux.dialer").info("dialing %s", "root@example.com")
        for handler in package_logger.handlers:
            handler.flush()
        assert "dialing root@example.com" in log_file.read_text()

    def test_quiets_paramiko_above_debug(self, package_logger):
        setup_logging("INFO", rich_tracebacks=False)
        assert logging.getLogger("paramiko").level == logging.WARNING
        setup_logging("DEBUG", rich_tracebacks=False)
        assert logging.getLogger("paramiko").level == logging.DEBUG

    def test_level_is_case_insensitive(self, package_logger):
        setup_logging("debug", rich_tracebacks=False)
        assert package_logger.level == logging.DEBUG

    def test_unknown_level(self, package_logger):
        with pytest.raises(ConfigError, match="Unknown log level"):
            setup_logging("LOUD", rich_tracebacks=False)
