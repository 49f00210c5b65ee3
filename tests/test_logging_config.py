"""
Test suite for logging configuration

Tests JSON formatting and handler setup.
"""

import json
import sys
import logging

import pytest

from transaction_processor.logging_config import (
    JSONFormatter, get_logger, log_action, setup_logging
)


class TestJSONFormatter:
    """Test structured log output"""

    def test_format_drops_empty_fields(self):
        record = logging.LogRecord("transaction_processor", logging.INFO, __file__, 1, "hello %s", ("world",), None)

        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "hello world"
        assert entry["level"] == "INFO"
        assert "action" not in entry
        assert "extra" not in entry
        assert "timestamp" in entry

    def test_format_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("t", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        entry = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: boom" in entry["exception"]


class TestSetupLogging:
    """Test logger configuration"""

    def setup_method(self):
        self.logger_name = "transaction_processor.test_logging"

    def teardown_method(self):
        logger = logging.getLogger(self.logger_name)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()

    def test_single_handler(self):
        setup_logging("INFO", self.logger_name)
        logger = setup_logging("DEBUG", self.logger_name)

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert not logger.propagate

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "run.log"
        logger = setup_logging("INFO", self.logger_name, log_file=str(log_file))

        log_action(logger, "info", "processed", action="process_file", extra={"applied": 3})
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip())
        assert entry["message"] == "processed"
        assert entry["action"] == "process_file"
        assert entry["extra"] == {"applied": 3}

    def test_text_format(self, capsys):
        logger = setup_logging("INFO", self.logger_name, log_format="text")

        logger.info("plain message")

        assert "INFO transaction_processor.test_logging: plain message" in capsys.readouterr().err

    def test_log_action_respects_level(self, capsys):
        logger = setup_logging("WARNING", self.logger_name)

        log_action(logger, "debug", "hidden")

        assert capsys.readouterr().err == ""

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            setup_logging("LOUD", self.logger_name)

    def test_invalid_format(self):
        with pytest.raises(ValueError, match="Unknown log format"):
            setup_logging("INFO", self.logger_name, log_format="xml")

    def test_get_logger(self):
        assert get_logger("transaction_processor.ledger").name == "transaction_processor.ledger"
