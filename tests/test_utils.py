"""
Tests for utility modules.
"""

from __future__ import annotations

import logging

import pytest
import structlog

from nocode_pipeline.config import LoggingSettings
from nocode_pipeline.utils.logging import get_logger, log_context, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    @pytest.mark.parametrize("format", ["console", "json"])
    def test_formats(self, format):
        setup_logging(LoggingSettings(level="DEBUG", format=format))
        assert get_logger("test") is not None

    def test_setup_all_options(self):
        setup_logging(
            LoggingSettings(
                level="WARNING",
                format="console",
                include_timestamp=False,
                include_location=True,
            )
        )
        assert get_logger("test") is not None

    def test_defaults(self):
        setup_logging()
        assert get_logger() is not None

    def test_verbose_forces_debug(self):
        setup_logging(LoggingSettings(level="ERROR"), verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_json_output(self, caplog):
        caplog.set_level(logging.INFO)
        setup_logging(LoggingSettings(format="json", include_timestamp=False))
        get_logger("nocode_pipeline.test").info("phase_started", phase="onCalibrationEnd")

        text = caplog.text
        assert '"event": "phase_started"' in text
        assert '"phase": "onCalibrationEnd"' in text

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Unknown log level: LOUD"):
            setup_logging(LoggingSettings(level="LOUD"))


class TestGetLogger:
    """Tests for get_logger function."""

    def test_logger_can_log(self):
        setup_logging(LoggingSettings(level="DEBUG"))
        logger = get_logger("test_logger")
        logger.debug("debug_event")
        logger.info("info_event", extra_field="value")
        logger.warning("warning_event")


class TestLogContext:
    """Tests for scoped context keys."""

    def test_keys_bound_inside_block(self):
        with log_context(run_id="test123", phase="onCalibrationEnd"):
            assert structlog.contextvars.get_contextvars() == {
                "run_id": "test123",
                "phase": "onCalibrationEnd",
            }
        assert "run_id" not in structlog.contextvars.get_contextvars()

    def test_nested_block_restores_outer(self):
        with log_context(run_id="outer"):
            with log_context(run_id="inner", phase="onLPSEnd"):
                assert structlog.contextvars.get_contextvars()["run_id"] == "inner"
            assert structlog.contextvars.get_contextvars() == {"run_id": "outer"}

    def test_keys_appear_in_events(self, caplog):
        caplog.set_level(logging.INFO)
        setup_logging(LoggingSettings(format="json", include_timestamp=False))
        with log_context(run_id="abc"):
            get_logger("nocode_pipeline.test").info("operation_completed")
        assert '"run_id": "abc"' in caplog.text
