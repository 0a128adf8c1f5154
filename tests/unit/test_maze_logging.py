"""
Unit tests for shapemaze.utils.maze_logging module.

Tests include:
- Thread safety of logger creation
- Configuration changes reaching existing loggers
- Fallback and summary helpers
- Timed operations
"""

from __future__ import annotations

import concurrent.futures
import logging

import pytest

from shapemaze.utils.maze_logging import (
    LoggedOperation,
    MazeFormatter,
    configure_development_logging,
    configure_logging,
    configure_production_logging,
    get_logger,
    log_fallback,
    log_generation_summary,
)
from shapemaze.utils.maze_logging.logger import MazeLogger


def _clear_test_loggers():
    for name in [k for k in MazeLogger._loggers if k.startswith("test.")]:
        del MazeLogger._loggers[name]
        logging.getLogger(name).handlers.clear()


class TestThreadSafety:
    """Test thread-safe logger creation."""

    def setup_method(self):
        _clear_test_loggers()

    def test_concurrent_logger_creation_no_duplicate_handlers(self):
        """Multiple threads creating same logger should not duplicate handlers."""
        handler_counts: dict[str, int] = {}

        def get_logger_from_thread(thread_id: int) -> str:
            logger_name = f"test.thread_{thread_id % 5}"
            logger = get_logger(logger_name)
            handler_counts[logger_name] = len(logger.handlers)
            return logger_name

        with concurrent.futures.ThreadPoolExecutor(max_workers=10) as executor:
            futures = [executor.submit(get_logger_from_thread, i) for i in range(50)]
            concurrent.futures.wait(futures)

        assert all(count == 1 for count in handler_counts.values()), handler_counts

    def test_same_logger_returned(self):
        assert get_logger("test.same") is get_logger("test.same")

    def test_default_name_from_caller(self):
        logger = get_logger()
        assert logger.name == __name__


class TestConfiguration:
    """Test global configuration."""

    def setup_method(self):
        _clear_test_loggers()

    def test_configure_updates_existing_loggers(self):
        logger = get_logger("test.configure")
        assert logger.level == logging.WARNING

        configure_logging(level="DEBUG")

        assert logger.level == logging.DEBUG
        assert all(handler.level == logging.DEBUG for handler in logger.handlers)

    def test_configure_numeric_level(self):
        configure_logging(level=logging.ERROR)
        assert get_logger("test.numeric").level == logging.ERROR

    def test_log_to_file(self, tmp_path):
        log_file = tmp_path / "logs" / "maze.log"
        configure_logging(level="INFO", log_to_file=True, log_file_path=log_file, use_colors=False)

        logger = get_logger("test.file")
        logger.info("written to file")
        for handler in logger.handlers:
            handler.flush()

        assert log_file.exists()
        assert "written to file" in log_file.read_text()

    def test_development_preset(self):
        configure_development_logging()
        logger = get_logger("test.dev")

        assert logger.level == logging.DEBUG
        assert MazeLogger._include_location

    def test_production_preset(self, tmp_path):
        path = configure_production_logging(str(tmp_path / "prod.log"))

        assert path.endswith("prod.log")
        assert get_logger("test.prod").level == logging.WARNING
        assert len(get_logger("test.prod").handlers) == 2


class TestFormatter:
    def test_plain_format(self):
        formatter = MazeFormatter(use_colors=False)
        record = logging.LogRecord("shapemaze.test", logging.INFO, __file__, 1, "hello", None, None)

        assert "hello" in formatter.format(record)
        assert "INFO" in formatter.format(record)

    def test_location_included(self):
        formatter = MazeFormatter(use_colors=False, include_location=True)
        record = logging.LogRecord("shapemaze.test", logging.INFO, __file__, 12, "hello", None, None)

        assert ":12]" in formatter.format(record)

    def test_colored_format_keeps_message(self):
        formatter = MazeFormatter(use_colors=True)
        record = logging.LogRecord("shapemaze.test", logging.WARNING, __file__, 1, "careful", None, None)

        assert "careful" in formatter.format(record)


class TestHelpers:
    """Test fallback and summary helpers."""

    def test_log_fallback(self, caplog):
        logger = get_logger("test.fallback")
        with caplog.at_level(logging.WARNING):
            log_fallback(logger, "forced_path", "carved 3 steps")

        assert caplog.records[-1].levelno == logging.WARNING
        assert caplog.records[-1].getMessage() == "Fallback [forced_path]: carved 3 steps"

    def test_log_generation_summary(self, caplog):
        logger = get_logger("test.summary")
        with caplog.at_level(logging.INFO, logger="test.summary"):
            log_generation_summary(logger, {"shape": "heart", "cells": 42})

        assert "Maze generated - shape: heart, cells: 42" in caplog.text

    def test_logged_operation_success(self, caplog):
        logger = get_logger("test.operation")
        with caplog.at_level(logging.DEBUG, logger="test.operation"):
            with LoggedOperation(logger, "carving") as operation:
                pass

        assert operation.start_time is not None
        assert "Starting carving" in caplog.text
        assert "Completed carving" in caplog.text

    def test_logged_operation_failure_propagates(self, caplog):
        logger = get_logger("test.operation_failure")
        with caplog.at_level(logging.ERROR):
            with pytest.raises(RuntimeError):
                with LoggedOperation(logger, "repair"):
                    raise RuntimeError("boom")

        assert "Failed repair" in caplog.text
        assert "boom" in caplog.text
