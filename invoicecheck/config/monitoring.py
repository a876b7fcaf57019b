"""
Error tracking (Sentry) and tracing configuration for the InvoiceCheck.in service.

Two bootstraps share one MonitoringConfig:
  - init_server_monitoring(): process-wide sentry_sdk client, run from the app lifespan
  - browser_monitoring_options(): options handed to the browser SDK by the page layout

Monitoring is only enabled in production. Elsewhere the server client is built
with an empty DSN, so it never opens a transport.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

import sentry_sdk
import structlog
from opentelemetry import trace
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from .settings import Settings

logger = structlog.get_logger(__name__)

DEFAULT_TRACES_SAMPLE_RATE = 0.1
# Replays are captured for errored sessions only
REPLAYS_SESSION_SAMPLE_RATE = 0.0
REPLAYS_ON_ERROR_SAMPLE_RATE = 1.0

_server_monitoring_initialized = False


@dataclass(frozen=True)
class MonitoringConfig:
    dsn: Optional[str]
    environment: str
    enabled: bool
    traces_sample_rate: float = DEFAULT_TRACES_SAMPLE_RATE
    browser_dsn: Optional[str] = None
    replays_session_sample_rate: float = REPLAYS_SESSION_SAMPLE_RATE
    replays_on_error_sample_rate: float = REPLAYS_ON_ERROR_SAMPLE_RATE
    mask_all_text: bool = True
    block_all_media: bool = True

    @property
    def server_dsn(self) -> str:
        """DSN handed to sentry_sdk; empty (never None) when monitoring is off."""
        return (self.dsn or "") if self.enabled else ""

    @classmethod
    def from_settings(cls, settings: Settings) -> "MonitoringConfig":
        return cls(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT,
            enabled=settings.is_production,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            browser_dsn=settings.SENTRY_BROWSER_DSN or settings.SENTRY_DSN,
        )


def init_server_monitoring(config: MonitoringConfig) -> bool:
    """Initialise the server-side Sentry client once per process.

    Returns True when this call performed the initialisation, False when a
    previous call already did.
    """
    global _server_monitoring_initialized  # noqa: PLW0603
    if _server_monitoring_initialized:
        return False

    sentry_sdk.init(
        # None would make the SDK fall back to the SENTRY_DSN env var
        dsn=config.server_dsn,
        environment=config.environment,
        traces_sample_rate=config.traces_sample_rate,
        send_default_pii=False,
        integrations=[StarletteIntegration(), FastApiIntegration()],
    )
    _server_monitoring_initialized = True
    logger.info(
        "Server monitoring configured",
        enabled=config.enabled,
        environment=config.environment,
        traces_sample_rate=config.traces_sample_rate,
    )
    return True


def reset_server_monitoring() -> None:
    """Forget the init-once flag (test helper)."""
    global _server_monitoring_initialized  # noqa: PLW0603
    _server_monitoring_initialized = False


def browser_monitoring_options(config: MonitoringConfig) -> Dict[str, Any]:
    """Options for the browser ``Sentry.init`` call rendered into page layouts."""
    return {
        "dsn": config.browser_dsn,
        "enabled": config.enabled,
        "environment": config.environment,
        "tracesSampleRate": config.traces_sample_rate,
        "replaysOnErrorSampleRate": config.replays_on_error_sample_rate,
        "replaysSessionSampleRate": config.replays_session_sample_rate,
        "replay": {
            "maskAllText": config.mask_all_text,
            "blockAllMedia": config.block_all_media,
        },
    }


def get_tracer(name: str) -> trace.Tracer:
    """Get OpenTelemetry tracer for manual instrumentation."""
    return trace.get_tracer(name)


@contextmanager
def trace_operation(operation_name: str, **attributes) -> Iterator[trace.Span]:
    """Run a block inside a span; failures are recorded on the span and re-raised."""
    with get_tracer(__name__).start_as_current_span(
        operation_name,
        attributes=attributes,
        record_exception=True,
        set_status_on_exception=True,
    ) as span:
        try:
            yield span
        except Exception as exc:
            logger.warning("Operation failed", operation=operation_name,
                           error_type=type(exc).__name__, **attributes)
            raise


__all__ = [
    "MonitoringConfig",
    "init_server_monitoring",
    "reset_server_monitoring",
    "browser_monitoring_options",
    "get_tracer",
    "trace_operation",
]
