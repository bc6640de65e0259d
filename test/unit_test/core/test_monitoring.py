"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Opt-in configuration (disabled, missing token, configured)
- SQLAlchemy and FastAPI instrumentation and their feature flags
- Graceful degradation when Logfire fails
- Authorship, request and error events
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI

from expertpress.core import monitoring
from expertpress.server.core import constant
from expertpress.server.core.config import settings


@pytest.fixture(autouse=True)
def _monitoring_off(monkeypatch):
    monkeypatch.setattr(monitoring, "_configured", False)


@pytest.fixture
def logfire_enabled(monkeypatch):
    monkeypatch.setattr(settings, "logfire_enabled", True)
    monkeypatch.setattr(settings, "logfire_token", "test-token-12345")
    monkeypatch.setattr(settings, "logfire_environment", "production")
    monkeypatch.setattr(settings, "logfire_service_name", "expertpress-test")
    monkeypatch.setattr(settings, "logfire_sample_rate", 0.5)


@pytest.fixture
def mock_logfire():
    with patch("expertpress.core.monitoring.logfire") as mocked:
        yield mocked


class TestMonitoringSettings:
    """Logfire settings bound from the environment."""

    def test_disabled_by_default(self):
        assert settings.logfire_enabled is False
        assert settings.logfire_token == ""

    def test_feature_flags_default_to_true(self):
        assert settings.logfire_trace_sqlalchemy is True
        assert settings.logfire_trace_fastapi is True

    def test_bound_from_environment(self, monkeypatch):
        from expertpress.server.core.config import Settings

        monkeypatch.setenv("LOGFIRE_ENABLED", "true")
        monkeypatch.setenv("LOGFIRE_SAMPLE_RATE", "0.25")
        monkeypatch.setenv("LOGFIRE_TRACE_FASTAPI", "false")

        loaded = Settings()

        assert loaded.logfire_enabled is True
        assert loaded.logfire_sample_rate == 0.25
        assert loaded.logfire_trace_fastapi is False


class TestInitializeLogfire:
    """Test initialize_logfire."""

    def test_disabled(self, mock_logfire):
        assert monitoring.initialize_logfire() is False

        mock_logfire.configure.assert_not_called()
        assert monitoring.is_configured() is False

    def test_enabled_without_token(self, logfire_enabled, monkeypatch, mock_logfire):
        monkeypatch.setattr(settings, "logfire_token", "")

        with patch.object(monitoring.logger, "warning") as mock_warning:
            assert monitoring.initialize_logfire() is False

        mock_logfire.configure.assert_not_called()
        assert "LOGFIRE_TOKEN" in mock_warning.call_args[0][0]

    def test_configure_called_with_settings(self, logfire_enabled, mock_logfire):
        assert monitoring.initialize_logfire() is True

        kwargs = mock_logfire.configure.call_args.kwargs
        assert kwargs["token"] == "test-token-12345"
        assert kwargs["service_name"] == "expertpress-test"
        assert kwargs["service_version"] == constant.VERSION
        assert kwargs["environment"] == "production"
        assert kwargs["sampling"].head == 0.5
        assert monitoring.is_configured() is True

    def test_instruments_sqlalchemy_engine(self, logfire_enabled, mock_logfire):
        engine = MagicMock()

        monitoring.initialize_logfire(engine=engine)

        mock_logfire.instrument_sqlalchemy.assert_called_once_with(engine=engine)

    def test_skips_sqlalchemy_without_engine(self, logfire_enabled, mock_logfire):
        monitoring.initialize_logfire()

        mock_logfire.instrument_sqlalchemy.assert_not_called()

    def test_instruments_fastapi_with_app(self, logfire_enabled, mock_logfire):
        app = FastAPI()

        monitoring.initialize_logfire(app=app)

        mock_logfire.instrument_fastapi.assert_called_once_with(app)

    def test_skips_fastapi_without_app(self, logfire_enabled, mock_logfire):
        monitoring.initialize_logfire()

        mock_logfire.instrument_fastapi.assert_not_called()

    def test_feature_flags_disabled(self, logfire_enabled, monkeypatch, mock_logfire):
        monkeypatch.setattr(settings, "logfire_trace_sqlalchemy", False)
        monkeypatch.setattr(settings, "logfire_trace_fastapi", False)

        assert monitoring.initialize_logfire(app=FastAPI(), engine=MagicMock()) is True

        mock_logfire.instrument_sqlalchemy.assert_not_called()
        mock_logfire.instrument_fastapi.assert_not_called()

    def test_instrumentation_failure_keeps_monitoring_on(self, logfire_enabled, mock_logfire):
        mock_logfire.instrument_fastapi.side_effect = RuntimeError("already instrumented")

        with patch.object(monitoring.logger, "warning") as mock_warning:
            assert monitoring.initialize_logfire(app=FastAPI()) is True

        assert "Failed to instrument FastAPI" in mock_warning.call_args[0][0]

    def test_configure_failure(self, logfire_enabled, mock_logfire):
        mock_logfire.configure.side_effect = ValueError("invalid token")

        with patch.object(monitoring.logger, "error") as mock_error:
            assert monitoring.initialize_logfire() is False

        mock_error.assert_called_once()
        assert monitoring.is_configured() is False


class TestEvents:
    """Test the log_* helpers."""

    @pytest.fixture
    def configured(self, monkeypatch):
        monkeypatch.setattr(monitoring, "_configured", True)

    def test_silent_when_not_configured(self, mock_logfire):
        monitoring.log_post_written("created", "p1", ["u1"])
        monitoring.log_expert_removed("u1", 2)
        monitoring.log_api_request("GET", "/", 200, 1.0)
        monitoring.log_error("ValueError", "boom")

        mock_logfire.info.assert_not_called()
        mock_logfire.error.assert_not_called()

    def test_log_post_written(self, configured, mock_logfire):
        monitoring.log_post_written("created", "p1", iter(["u1", "u2"]))

        mock_logfire.info.assert_called_once_with("Post {action}", action="created", post_id="p1", expert_ids=["u1", "u2"])

    def test_log_expert_removed(self, configured, mock_logfire):
        monitoring.log_expert_removed("u1", 3)

        mock_logfire.info.assert_called_once_with("Expert removed", user_id="u1", deleted_posts=3)

    @pytest.mark.parametrize("status_code", [200, 404, 500])
    def test_log_api_request(self, configured, mock_logfire, status_code):
        monitoring.log_api_request("PUT", "/api/v1/posts/p1", status_code, 12.5)

        kwargs = mock_logfire.info.call_args.kwargs
        assert kwargs == {"method": "PUT", "path": "/api/v1/posts/p1", "status_code": status_code, "duration_ms": 12.5}

    def test_log_error_with_context(self, configured, mock_logfire):
        monitoring.log_error("RuntimeError", "boom", {"error_id": 1, "path": "/health"})

        mock_logfire.error.assert_called_once_with("RuntimeError: boom", error_id=1, path="/health")

    def test_log_error_without_context(self, configured, mock_logfire):
        monitoring.log_error("RuntimeError", "boom")

        mock_logfire.error.assert_called_once_with("RuntimeError: boom")

    def test_logfire_failure_is_swallowed(self, configured, mock_logfire):
        mock_logfire.info.side_effect = RuntimeError("exporter down")
        mock_logfire.error.side_effect = RuntimeError("exporter down")

        monitoring.log_post_written("edited", "p1", [])
        monitoring.log_expert_removed("u1", 0)
        monitoring.log_api_request("GET", "/", 200, 1.0)
        monitoring.log_error("ValueError", "boom")


async def test_repository_writes_are_reported(repos, staff, monkeypatch, mock_logfire):
    monkeypatch.setattr(monitoring, "_configured", True)

    post, _ = await repos.posts.add(
        {"title": "Duo", "slug": "duo", "experts": [{"id": staff["expert"].id}, {"id": staff["co_expert"].id}]},
        context_user=staff["expert"].id,
    )
    await repos.posts.edit(post.id, {"title": "Duet"})
    await repos.users.destroy(staff["expert"].id)

    events = [(call.args[0], call.kwargs) for call in mock_logfire.info.call_args_list]
    assert events == [
        ("Post {action}", {"action": "created", "post_id": post.id, "expert_ids": [staff["expert"].id, staff["co_expert"].id]}),
        ("Post {action}", {"action": "edited", "post_id": post.id, "expert_ids": [staff["expert"].id, staff["co_expert"].id]}),
        ("Expert removed", {"user_id": staff["expert"].id, "deleted_posts": 1}),
    ]
