"""Request-scoped accessors for objects the application factory stores on ``app.state``."""
from fastapi import Request

from ..config.monitoring import MonitoringConfig
from ..config.settings import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_monitoring_config(request: Request) -> MonitoringConfig:
    return request.app.state.monitoring
