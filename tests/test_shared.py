"""
Tests for the shared configuration, error, logging and metrics helpers.
"""

import logging
import pytest
import structlog
from prometheus_client import CollectorRegistry

from shared.config import ThrottleSettings, get_settings
from shared.errors import (
    ErrorResponse,
    InvalidRateError,
    PoolExhaustedError,
    ShortWriteError,
    ThrottleError,
)
from shared.logging import add_component_context, configure_logging, get_logger
from shared.metrics import ThrottleMetrics, get_metrics


class TestErrors:
    """Test cases for error types."""

    def test_pool_exhausted_response(self):
        error = PoolExhaustedError(details={"requested": 5120})

        response = error.to_response()

        assert isinstance(response, ErrorResponse)
        assert response.code == "POOL_EXHAUSTED"
        assert response.details == {"requested": 5120}
        assert isinstance(error, ThrottleError)

    def test_short_write_carries_count(self):
        error = ShortWriteError(300)

        assert error.written == 300
        assert error.details["written"] == 300
        assert error.to_response().code == "SHORT_WRITE"

    def test_invalid_rate_is_value_error(self):
        error = InvalidRateError(-3)

        assert isinstance(error, ValueError)
        assert error.rate == -3
        assert "-3" in error.message


class TestSettings:
    """Test cases for ThrottleSettings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("IOTHROTTLE_POOL_CAPACITY", raising=False)

        settings = ThrottleSettings(_env_file=None)

        assert settings.log_level == "info"
        assert settings.pool_capacity == 1 << 20
        assert settings.metrics_enabled is True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("IOTHROTTLE_POOL_CAPACITY", "8192")
        monkeypatch.setenv("IOTHROTTLE_METRICS_ENABLED", "false")

        settings = get_settings(_env_file=None)

        assert settings.pool_capacity == 8192
        assert settings.metrics_enabled is False

    def test_rejects_non_positive_capacity(self):
        with pytest.raises(ValueError):
            ThrottleSettings(pool_capacity=0, _env_file=None)


class TestLogging:
    """Test cases for logging helpers."""

    def test_component_from_logger_name(self):
        event = add_component_context(None, "info", {"logger": "iothrottle.pool", "event": "x"})

        assert event["component"] == "pool"

    def test_no_component_for_flat_name(self):
        event = add_component_context(None, "info", {"logger": "root", "event": "x"})

        assert "component" not in event

    def test_configure_and_log(self, caplog):
        configure_logging(ThrottleSettings(log_level="debug", log_json=True, _env_file=None))
        caplog.set_level(logging.DEBUG)

        get_logger("iothrottle.test").info("hello", rate=1024)

        assert any("hello" in record.getMessage() for record in caplog.records)


class TestMetrics:
    """Test cases for ThrottleMetrics."""

    def test_records_into_private_registry(self):
        registry = CollectorRegistry()
        metrics = ThrottleMetrics(registry=registry)

        metrics.record_transfer("read", 10)
        metrics.record_allocation("read", "granted")
        metrics.adjust_pool_allocated("read", 4096)
        metrics.adjust_pool_allocated("read", -2048)

        assert registry.get_sample_value("iothrottle_bytes_transferred_total", {"direction": "read"}) == 10
        assert registry.get_sample_value(
            "iothrottle_pool_allocations_total", {"pool": "read", "outcome": "granted"}) == 1
        assert registry.get_sample_value("iothrottle_pool_allocated_bytes_per_second", {"pool": "read"}) == 2048

    def test_disabled_collector_records_nothing(self):
        registry = CollectorRegistry()
        metrics = ThrottleMetrics(registry=registry, enabled=False)

        metrics.record_transfer("write", 10)

        assert registry.get_sample_value("iothrottle_bytes_transferred_total", {"direction": "write"}) is None

    def test_default_collector_is_shared(self):
        assert get_metrics() is get_metrics()

    def test_console_renderer_from_settings(self):
        configure_logging(ThrottleSettings(log_level="info", log_json=False, _env_file=None))

        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)

        configure_logging(ThrottleSettings(log_level="info", log_json=True, _env_file=None))
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)
