"""Tests for centralized logging configuration using Loguru."""

from pathlib import Path

import pytest
from loguru import logger

import actkit.kernel.logging as logging_module
from actkit.kernel.logging import configure_logging, get_logger


class TestGetLogger:
    """Test get_logger function."""

    def test_get_logger_returns_bound_logger(self):
        assert get_logger("actkit.test") is not None

    def test_get_logger_caches_results(self):
        """Loggers are cached per name."""
        assert get_logger("test.cache") is get_logger("test.cache")


class TestConfigureLogging:
    """Test configure_logging function."""

    def setup_method(self):
        logging_module._CURRENT_CONFIG = None

    def teardown_method(self):
        configure_logging(force_reconfigure=True)

    def test_configures_each_format(self):
        for log_format in ("json", "structured", "console", "rich"):
            configure_logging(level="INFO", format=log_format, force_reconfigure=True)
            assert len(logging_module._HANDLER_IDS) == 1

    def test_configures_file_output(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "actkit.log"
        configure_logging(level="INFO", format="json", output_file=log_file)

        assert len(logging_module._HANDLER_IDS) == 2
        get_logger("test").info("Audit started")
        assert log_file.exists()

    def test_idempotent_reconfiguration(self):
        configure_logging(level="DEBUG", format="console")
        handler_ids = list(logging_module._HANDLER_IDS)

        configure_logging(level="DEBUG", format="console")

        assert logging_module._HANDLER_IDS == handler_ids

    def test_changed_settings_replace_handlers(self):
        configure_logging(level="INFO", format="console")
        first = list(logging_module._HANDLER_IDS)

        configure_logging(level="DEBUG", format="console")

        assert logging_module._HANDLER_IDS != first
        assert logging_module._CURRENT_CONFIG["level"] == "DEBUG"

    def test_removes_loguru_default_sink(self):
        """The import-time stderr sink would ignore the configured level."""
        configure_logging(level="ERROR", format="console", force_reconfigure=True)

        with pytest.raises(ValueError):
            logger.remove(logging_module._DEFAULT_HANDLER_ID)
        assert logging_module._DEFAULT_HANDLER_REMOVED is True
        assert len(logging_module._HANDLER_IDS) == 1
