"""
Unit tests for logger utilities.

Tests ContextAwareLogger, the correlation id filter, secret masking, and
service logger configuration.
"""

import logging
from unittest.mock import Mock

import pytest

from gust_auth_core.exceptions import clear_correlation_id, set_correlation_id
from gust_auth_core.utils.logger import (
    ContextAwareLogger,
    CorrelationIdFilter,
    configure_logging,
    get_logger,
    mask_secret,
    reset_logging,
)


class TestContextAwareLogger:
    """Test ContextAwareLogger functionality."""

    def setup_method(self):
        self.mock_logger = Mock(spec=logging.Logger)
        self.context_logger = ContextAwareLogger(self.mock_logger)

    def test_set_level(self):
        self.context_logger.set_level(logging.DEBUG)

        self.mock_logger.setLevel.assert_called_once_with(logging.DEBUG)

    def test_message_without_extra(self):
        self.context_logger.info("Plain message")

        self.mock_logger.info.assert_called_once_with("Plain message", extra={})

    def test_extra_is_appended_pipe_delimited(self):
        self.context_logger.warning("Key rejected", extra={"external_id": 555, "used": 50})

        self.mock_logger.warning.assert_called_once_with(
            "Key rejected | external_id=555 | used=50",
            extra={"external_id": 555, "used": 50},
        )

    def test_reserved_record_keys_are_renamed(self):
        """Keys that collide with LogRecord attributes do not break logging."""
        self.context_logger.error("Boom", extra={"message": "inner", "module": "x"})

        _, kwargs = self.mock_logger.error.call_args
        assert kwargs["extra"] == {"_message": "inner", "_module": "x"}

    def test_exc_info_is_forwarded(self):
        cause = RuntimeError("db down")

        self.context_logger.error("Failed", exc_info=cause)

        _, kwargs = self.mock_logger.error.call_args
        assert kwargs["exc_info"] is cause

    @pytest.mark.parametrize("level", ["debug", "info", "warning", "error", "exception"])
    def test_level_methods_delegate(self, level):
        getattr(self.context_logger, level)("msg")

        getattr(self.mock_logger, level).assert_called_once()


class TestCorrelationIdFilter:
    """Test stamping records with the correlation id."""

    def teardown_method(self):
        clear_correlation_id()

    def _record(self):
        return logging.LogRecord("gust", logging.INFO, __file__, 1, "msg", None, None)

    def test_adds_correlation_id(self):
        set_correlation_id("corr-42")
        record = self._record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "corr-42"

    def test_no_correlation_id(self):
        record = self._record()

        assert CorrelationIdFilter().filter(record) is True
        assert not hasattr(record, "correlation_id")


class TestMaskSecret:
    """Test secret masking for log output."""

    def test_api_key_keeps_prefix(self):
        masked = mask_secret("gust_3f1c2b9a-0000-4000-8000-000000000000")

        assert masked == "gust_3f1c***"

    def test_plain_secret(self):
        assert mask_secret("tok123456") == "tok1***"

    @pytest.mark.parametrize("value", ["", None])
    def test_empty(self, value):
        assert mask_secret(value) == ""


class TestConfigureLogging:
    """Test service logger configuration."""

    def teardown_method(self):
        reset_logging()

    def test_configure_installs_single_console_handler(self):
        wrapped = configure_logging("weather-proxy", log_level="DEBUG")
        configure_logging("weather-proxy", log_level="DEBUG")

        assert isinstance(wrapped, ContextAwareLogger)
        assert wrapped.logger.name == "gust.weather-proxy"
        assert wrapped.logger.level == logging.DEBUG
        assert len(wrapped.logger.handlers) == 1
        assert any(
            isinstance(f, CorrelationIdFilter) for f in wrapped.logger.handlers[0].filters
        )

    def test_get_logger_returns_configured_logger(self):
        wrapped = configure_logging("weather-proxy")

        assert get_logger() is wrapped

    def test_get_logger_falls_back_to_package_logger(self):
        reset_logging()

        logger = get_logger("WARNING")

        assert isinstance(logger, ContextAwareLogger)
        assert logger.logger.name == "gust"
        assert logger.logger.level == logging.WARNING
