"""
Tests for observability components.

Tests:
- Request id context binding
- Best-effort steps and error capture
- Logging setup
- Request ID middleware headers
"""

from unittest.mock import patch

import pytest
import structlog

from folio.core import context, logging_config
from folio.core.errors import best_effort, capture_exception
from folio.middleware.context import safe_id


class TestRequestContext:
    def setup_method(self):
        context.reset()

    def teardown_method(self):
        context.reset()

    def test_new_request_id_format(self):
        """Request ID format: req_{16 hex chars}."""
        request_id = context.new_request_id()
        assert request_id.startswith("req_")
        assert len(request_id) == 20

    def test_bind_and_reset(self):
        context.bind(request_id="req_test", identity="user-1", correlation_id="corr_abc")

        assert context.snapshot() == {"request_id": "req_test", "correlation_id": "corr_abc", "identity": "user-1"}

        context.reset()
        assert context.snapshot() == {"request_id": None, "correlation_id": None, "identity": None}
        assert structlog.contextvars.get_contextvars() == {}

    def test_bind_skips_none(self):
        context.bind(request_id="req_test")
        context.bind(request_id=None, identity="user-1")

        assert context.snapshot()["request_id"] == "req_test"

    def test_extra_fields_only_reach_log_context(self):
        context.bind(request_id="req_test", path="/health", method="GET")

        assert "path" not in context.snapshot()
        assert structlog.contextvars.get_contextvars()["path"] == "/health"

    def test_outbound_correlation_prefers_caller_id(self):
        context.bind(request_id="req_test", correlation_id="corr_abc")
        assert context.outbound_correlation_id() == "corr_abc"

    def test_outbound_correlation_falls_back_to_request_id(self):
        context.bind(request_id="req_test")
        assert context.outbound_correlation_id() == "req_test"


class TestBestEffort:
    def test_suppresses_and_captures(self):
        with patch("folio.core.errors.capture_exception") as mock_capture:
            with best_effort("send_publish_notification", post_id="p1"):
                raise RuntimeError("relay down")

        mock_capture.assert_called_once()
        args, kwargs = mock_capture.call_args
        assert args[1] == "send_publish_notification"
        assert kwargs["level"] == "warning"
        assert kwargs["post_id"] == "p1"

    def test_no_error(self):
        with patch("folio.core.errors.capture_exception") as mock_capture:
            with best_effort("op"):
                pass
        mock_capture.assert_not_called()

    def test_capture_without_sentry_returns_none(self):
        assert capture_exception(RuntimeError("x"), "create_post", post_id="p1") is None


class TestConfigureLogging:
    def test_configures_once(self):
        with patch.object(logging_config, "_configured", False), patch.object(
            logging_config.structlog, "configure"
        ) as mock_configure:
            logging_config.configure_logging(json_logs=True)
            logging_config.configure_logging(json_logs=False)

        mock_configure.assert_called_once()

    def test_json_mode_renders_json(self):
        with patch.object(logging_config, "_configured", False), patch.object(
            logging_config.structlog, "configure"
        ) as mock_configure:
            logging_config.configure_logging(json_logs=True)

        processors = mock_configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)


class TestRequestIdMiddleware:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("req_abc-123", "req_abc-123"),
            ("", None),
            (None, None),
            ("x" * 65, None),
            ("bad\nvalue", None),
            ("abc\n", None),
        ],
    )
    def test_safe_id(self, value, expected):
        assert safe_id(value) == expected

    def test_generated_request_id_header(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.headers["X-Request-ID"].startswith("req_")

    def test_passes_through_ids(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req_given", "X-Correlation-ID": "corr_1"})

        assert response.headers["X-Request-ID"] == "req_given"
        assert response.headers["X-Correlation-ID"] == "corr_1"

    def test_unsafe_request_id_replaced(self, client):
        response = client.get("/health", headers={"X-Request-ID": "bad id;drop"})

        assert response.headers["X-Request-ID"] != "bad id;drop"
        assert response.headers["X-Request-ID"].startswith("req_")
