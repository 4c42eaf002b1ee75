"""Unit tests for staffing_cache.core.logging module.

Tests structured logging configuration and logger creation.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
import structlog

from staffing_cache.core.config import Settings
from staffing_cache.core.logging import (
    QUIET_LOGGERS,
    add_service_context,
    build_processors,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_development(self) -> None:
        """Test development uses the console renderer."""
        with patch("staffing_cache.core.logging.get_settings") as mock_settings:
            mock_settings.return_value.environment = "development"
            mock_settings.return_value.log_level = "DEBUG"

            with patch("staffing_cache.core.logging.structlog.configure") as mock_configure:
                configure_logging()

                mock_configure.assert_called_once()
                processors = mock_configure.call_args.kwargs["processors"]
                assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_configure_logging_production(self) -> None:
        """Test production renders JSON."""
        with patch("staffing_cache.core.logging.get_settings") as mock_settings:
            mock_settings.return_value.environment = "production"
            mock_settings.return_value.log_level = "INFO"

            with patch("staffing_cache.core.logging.structlog.configure") as mock_configure:
                configure_logging()

                processors = mock_configure.call_args.kwargs["processors"]
                assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_configure_logging_idempotent(self) -> None:
        """Test that configure_logging can be called multiple times safely."""
        with patch("staffing_cache.core.logging.get_settings") as mock_settings:
            mock_settings.return_value.environment = "development"
            mock_settings.return_value.log_level = "INFO"
            mock_settings.return_value.service_name = "staffing-cache"

            configure_logging()
            configure_logging()

        structlog.reset_defaults()

    def test_explicit_settings_used(self) -> None:
        """Test passed settings win over get_settings()."""
        settings = Settings(environment="staging", log_level="WARNING")
        with patch("staffing_cache.core.logging.get_settings") as mock_settings:
            with patch("staffing_cache.core.logging.structlog.configure") as mock_configure:
                configure_logging(settings)

        mock_settings.assert_not_called()
        processors = mock_configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_http_loggers_quieted(self) -> None:
        """Test httpx and httpcore are held at WARNING."""
        with patch("staffing_cache.core.logging.structlog.configure"):
            configure_logging(Settings(log_level="DEBUG"))

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING


class TestBuildProcessors:
    """Tests for build_processors function."""

    @pytest.mark.parametrize(
        ("environment", "renderer"),
        [
            ("production", structlog.processors.JSONRenderer),
            ("staging", structlog.processors.JSONRenderer),
            ("development", structlog.dev.ConsoleRenderer),
            ("test", structlog.dev.ConsoleRenderer),
        ],
    )
    def test_renderer_by_environment(self, environment: str, renderer: type) -> None:
        """Test the renderer is chosen by environment and placed last."""
        processors = build_processors(Settings(environment=environment))
        assert isinstance(processors[-1], renderer)

    def test_service_context_included(self) -> None:
        """Test every chain stamps service context."""
        assert add_service_context in build_processors(Settings())


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_with_name(self) -> None:
        """Test getting a named logger."""
        with patch("staffing_cache.core.logging.structlog.get_logger") as mock_get:
            mock_get.return_value = MagicMock()

            get_logger("staffing_cache.cache.store")

            mock_get.assert_called_once_with("staffing_cache.cache.store")

    def test_get_logger_without_name(self) -> None:
        """Test getting logger without explicit name."""
        with patch("staffing_cache.core.logging.structlog.get_logger") as mock_get:
            mock_get.return_value = MagicMock()

            get_logger()

            mock_get.assert_called_once_with(None)


class TestAddServiceContext:
    """Tests for add_service_context processor."""

    def test_adds_service_context(self) -> None:
        """Test that service context is added to log events."""
        with patch("staffing_cache.core.logging.get_settings") as mock_settings:
            mock_settings.return_value.service_name = "staffing-cache"
            mock_settings.return_value.environment = "test"

            result = add_service_context(None, "info", {"event": "Cache hit"})

            assert result["service"] == "staffing-cache"
            assert result["environment"] == "test"

    def test_preserves_existing_fields(self) -> None:
        """Test that existing fields are preserved."""
        with patch("staffing_cache.core.logging.get_settings") as mock_settings:
            mock_settings.return_value.service_name = "staffing-cache"
            mock_settings.return_value.environment = "test"

            event_dict = {"event": "Cache hit", "key": "staff-list:mgr_1"}
            result = add_service_context(None, "info", event_dict)

            assert result["key"] == "staff-list:mgr_1"
            assert result["event"] == "Cache hit"

    def test_does_not_overwrite_bound_service(self) -> None:
        """Test an explicitly bound service field is kept."""
        with patch("staffing_cache.core.logging.get_settings") as mock_settings:
            mock_settings.return_value.service_name = "staffing-cache"
            mock_settings.return_value.environment = "test"

            result = add_service_context(None, "info", {"event": "x", "service": "worker"})

            assert result["service"] == "worker"
