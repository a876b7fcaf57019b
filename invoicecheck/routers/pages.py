"""Authentication section pages rendered inside the shared auth layout."""
from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ..config.monitoring import MonitoringConfig, browser_monitoring_options
from ..config.settings import Settings
from .dependencies import get_app_settings, get_monitoring_config

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter()


def _layout_context(settings: Settings, monitoring: MonitoringConfig) -> dict:
    return {
        "site_name": settings.SITE_NAME,
        "home_url": "/",
        "monitoring": browser_monitoring_options(monitoring) if monitoring.enabled else None,
    }


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    monitoring: MonitoringConfig = Depends(get_monitoring_config),
):
    return templates.TemplateResponse(
        request, "auth/login.html", _layout_context(settings, monitoring))


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    monitoring: MonitoringConfig = Depends(get_monitoring_config),
):
    return templates.TemplateResponse(
        request, "auth/signup.html", _layout_context(settings, monitoring))
