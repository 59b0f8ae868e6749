"""
Tests for logging setup (blueprint_parser.logger).

A throwaway logger name is used so the package logger keeps its handlers.
"""

import logging

import pytest

from blueprint_parser.logger import PACKAGE_LOGGER, get_module_logger, setup_logger


@pytest.fixture
def scratch_logger():
    name = "blueprint_parser_logging_test"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_setup_logger_accepts_level_names(scratch_logger):
    assert setup_logger(scratch_logger, level="debug").level == logging.DEBUG
    assert setup_logger(scratch_logger, level=" Warning ").level == logging.WARNING
    assert setup_logger(scratch_logger, level="chatty").level == logging.INFO


def test_setup_logger_repeat_calls_do_not_duplicate_handlers(scratch_logger, tmp_path):
    log_file = str(tmp_path / "parser.log")

    setup_logger(scratch_logger, log_file=log_file)
    logger = setup_logger(scratch_logger, level=logging.ERROR, log_file=log_file)

    assert len(logger.handlers) == 2
    assert all(handler.level == logging.ERROR for handler in logger.handlers)


def test_setup_logger_writes_to_log_file(scratch_logger, tmp_path):
    log_file = tmp_path / "parser.log"
    logger = setup_logger(scratch_logger, log_file=str(log_file))

    logger.info("listing parsed")
    for handler in logger.handlers:
        handler.flush()

    assert "INFO - listing parsed" in log_file.read_text()


def test_module_loggers_are_package_children():
    child = get_module_logger("extractor")
    assert child.name == "blueprint_parser.extractor"
    assert child.parent is logging.getLogger(PACKAGE_LOGGER)
