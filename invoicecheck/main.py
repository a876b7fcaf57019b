"""
FastAPI application factory and configuration.
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, UTC
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Gauge, Histogram
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from . import __version__
from .config.logging import configure_logging
from .config.monitoring import MonitoringConfig, init_server_monitoring
from .config.settings import Settings, get_settings
from .routers.metrics import router as metrics_router
from .routers.pages import router as pages_router
from .routers.reports import router as reports_router
from .routers.system import router as system_router
from .utils.errors import error_payload, error_response

logger = logging.getLogger(__name__)

APP_REQUEST_COUNT = Counter(
    "app_requests_total",
    "Total HTTP requests processed",
    ["method", "path", "status"],
)
APP_REQUEST_LATENCY = Histogram(
    "app_request_duration_seconds",
    "Request latency in seconds",
    ["method", "path", "status"],
)
APP_UPTIME_SECONDS = Gauge(
    "app_uptime_seconds",
    "Application uptime in seconds",
)

APP_START_TIME = datetime.now(UTC)

# Report rendering routinely exceeds this; only logged, never enforced.
SLOW_RESPONSE_MS = 1000


class ResponseTimeMiddleware(BaseHTTPMiddleware):
    """Record per-request latency as a header and as Prometheus metrics."""

    async def dispatch(self, request: Request, call_next):  # noqa: D401
        start_time = time.time()
        response = await call_next(request)
        duration_s = time.time() - start_time
        response_time_ms = duration_s * 1000
        response.headers["X-Response-Time"] = f"{response_time_ms:.1f}ms"

        status = str(response.status_code)
        path = request.url.path
        APP_REQUEST_COUNT.labels(request.method, path, status).inc()
        APP_REQUEST_LATENCY.labels(request.method, path, status).observe(duration_s)
        APP_UPTIME_SECONDS.set((datetime.now(UTC) - APP_START_TIME).total_seconds())

        if response_time_ms > SLOW_RESPONSE_MS:
            logger.info(
                "Slow response: %.1fms for %s %s",
                response_time_ms,
                request.method,
                path,
            )
        return response


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Generate a per-request ID, expose it to handlers and echo it back."""

    async def dispatch(self, request: Request, call_next):  # noqa: D401
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    settings: Settings = app.state.settings
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting up InvoiceCheck report service (environment=%s)", settings.ENVIRONMENT)
    init_server_monitoring(app.state.monitoring)
    yield
    logger.info("Shutting down InvoiceCheck report service...")


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Monitoring is configured from ``settings`` when the lifespan starts, not here,
    so building an app never talks to the monitoring vendor.
    """
    settings = settings or get_settings()

    application_obj = FastAPI(
        title="InvoiceCheck.in Report Service",
        description="Invoice validation report downloads and authentication pages",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    application_obj.state.settings = settings
    application_obj.state.monitoring = MonitoringConfig.from_settings(settings)

    setup_middleware(application_obj)
    setup_exception_handlers(application_obj)
    setup_routes(application_obj)

    return application_obj


def setup_middleware(app: FastAPI) -> None:
    """Setup application middleware."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    app.add_middleware(ResponseTimeMiddleware)
    app.add_middleware(RequestIDMiddleware)


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions (404, 405, ...) with the shared error shape."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return error_response(500, "internal")


def setup_routes(app: FastAPI) -> None:
    """Setup application routes."""
    app.include_router(pages_router, tags=["Auth pages"])
    app.include_router(reports_router, prefix="/api", tags=["Reports"])
    app.include_router(system_router)
    # Exposes /metrics (Prometheus exposition format) without API prefix
    app.include_router(metrics_router)


# Create the application instance
app = create_application()


__all__ = ["app", "create_application", "lifespan"]
