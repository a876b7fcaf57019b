import json
import os
from unittest.mock import patch

import pytest
import sentry_sdk
from starlette.testclient import TestClient

from invoicecheck.config.monitoring import (
    MonitoringConfig,
    browser_monitoring_options,
    init_server_monitoring,
    trace_operation,
)
from invoicecheck.config.settings import Settings
from invoicecheck.main import create_application

DSN = "https://public@o0.ingest.sentry.io/0"


def _config(environment: str) -> MonitoringConfig:
    return MonitoringConfig.from_settings(Settings(ENVIRONMENT=environment, SENTRY_DSN=DSN))


def test_config_enabled_only_in_production():
    assert _config("production").enabled is True
    assert _config("development").enabled is False
    assert _config("test").enabled is False


def test_server_init_disabled_outside_production():
    with patch("invoicecheck.config.monitoring.sentry_sdk.init") as init:
        assert init_server_monitoring(_config("development")) is True
    init.assert_called_once()
    kwargs = init.call_args.kwargs
    assert kwargs["dsn"] == ""
    assert kwargs["traces_sample_rate"] == 0.1


def test_server_init_enabled_in_production():
    with patch("invoicecheck.config.monitoring.sentry_sdk.init") as init:
        init_server_monitoring(_config("production"))
    kwargs = init.call_args.kwargs
    assert kwargs["dsn"] == DSN
    assert kwargs["environment"] == "production"
    assert kwargs["traces_sample_rate"] == 0.1


def test_server_init_runs_once_per_process():
    with patch("invoicecheck.config.monitoring.sentry_sdk.init") as init:
        assert init_server_monitoring(_config("production")) is True
        assert init_server_monitoring(_config("production")) is False
    assert init.call_count == 1


def test_browser_options_replay_errors_only_and_masked():
    opts = browser_monitoring_options(_config("production"))
    assert opts["enabled"] is True
    assert opts["dsn"] == DSN
    assert opts["tracesSampleRate"] == 0.1
    assert opts["replaysOnErrorSampleRate"] == 1.0
    assert opts["replaysSessionSampleRate"] == 0
    assert opts["replay"] == {"maskAllText": True, "blockAllMedia": True}
    json.dumps(opts)


def test_browser_options_disabled_outside_production():
    assert browser_monitoring_options(_config("development"))["enabled"] is False


def test_building_app_does_not_touch_monitoring():
    with patch("invoicecheck.config.monitoring.sentry_sdk.init") as init:
        create_application(Settings(ENVIRONMENT="test", SENTRY_DSN=DSN))
    init.assert_not_called()


def test_app_lifespan_bootstraps_disabled_monitoring():
    app = create_application(Settings(ENVIRONMENT="test", SENTRY_DSN=DSN))
    with patch("invoicecheck.config.monitoring.sentry_sdk.init") as init:
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
    init.assert_called_once()
    assert init.call_args.kwargs["dsn"] == ""


def test_trace_operation_reraises_errors():
    with pytest.raises(ValueError, match="boom"):
        with trace_operation("unit_test_op", kind="test"):
            raise ValueError("boom")


def test_trace_operation_yields_span():
    with trace_operation("unit_test_op") as span:
        assert span is not None


@pytest.fixture
def _sentry_client_restored():
    yield
    sentry_sdk.get_global_scope().set_client(None)


def test_disabled_client_ignores_sentry_dsn_env(monkeypatch, _sentry_client_restored):
    monkeypatch.setenv("SENTRY_DSN", DSN)
    monkeypatch.setenv("APP_ENV", "development")
    config = MonitoringConfig.from_settings(Settings.load())
    assert config.enabled is False

    init_server_monitoring(config)

    client = sentry_sdk.get_client()
    assert not client.dsn
    assert client.transport is None
    assert os.environ["SENTRY_DSN"] == DSN


def test_production_without_dsn_stays_silent(monkeypatch, _sentry_client_restored):
    monkeypatch.setenv("SENTRY_DSN", DSN)
    init_server_monitoring(MonitoringConfig(dsn=None, environment="production", enabled=True))
    assert sentry_sdk.get_client().transport is None
