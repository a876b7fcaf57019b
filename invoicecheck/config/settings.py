"""Application settings module.

Provides centralized configuration using environment variables with sane defaults.
Monitoring is only enabled when the environment marker equals ``production``.
"""
from __future__ import annotations

from functools import lru_cache
import os
from typing import Optional

from pydantic import BaseModel, field_validator

from ..utils.filenames import SAFE_NAME_MAX_LENGTH, clamp_name_length

PRODUCTION = "production"


class Settings(BaseModel):
    # Environment marker (mirrors NODE_ENV of the web frontend)
    ENVIRONMENT: str = "development"

    # Monitoring
    SENTRY_DSN: Optional[str] = None
    SENTRY_BROWSER_DSN: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    LOG_LEVEL: str = "INFO"

    # Presentation
    SITE_NAME: str = "InvoiceCheck.in"

    # Report download
    REPORT_FILENAME_MAX_LENGTH: int = SAFE_NAME_MAX_LENGTH

    @field_validator("REPORT_FILENAME_MAX_LENGTH")
    @classmethod
    def _bound_filename_length(cls, value: int) -> int:
        return clamp_name_length(value)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == PRODUCTION

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment with type coercion and defaults."""
        def _get_float(name: str, default: float) -> float:
            raw = os.getenv(name)
            if raw is None:
                return default
            try:
                return float(raw)
            except ValueError:
                return default

        def _get_int(name: str, default: int) -> int:
            raw = os.getenv(name)
            if raw is None:
                return default
            try:
                return int(raw)
            except ValueError:
                return default

        server_dsn = os.getenv("SENTRY_DSN") or None
        return cls(
            ENVIRONMENT=os.getenv("APP_ENV") or os.getenv("ENVIRONMENT", "development"),
            SENTRY_DSN=server_dsn,
            SENTRY_BROWSER_DSN=os.getenv("SENTRY_BROWSER_DSN") or server_dsn,
            SENTRY_TRACES_SAMPLE_RATE=_get_float("SENTRY_TRACES_SAMPLE_RATE", 0.1),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
            SITE_NAME=os.getenv("SITE_NAME", "InvoiceCheck.in"),
            REPORT_FILENAME_MAX_LENGTH=_get_int("REPORT_FILENAME_MAX_LENGTH", SAFE_NAME_MAX_LENGTH),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance (singleton pattern)."""
    return Settings.load()


__all__ = ["PRODUCTION", "Settings", "get_settings"]
