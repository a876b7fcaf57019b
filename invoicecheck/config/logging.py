"""Structured logging configuration.

stdlib loggers (routers, middleware) and structlog loggers (monitoring) share one
JSON renderer on stdout. ``extra`` attributes such as request_id become JSON keys.
"""
from __future__ import annotations

import logging as _logging
import sys
from typing import Any, Optional

import structlog

_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for application startup."""
    structlog.configure(
        processors=_SHARED_PROCESSORS + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS + [structlog.stdlib.ExtraAdder()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
    )
    handler = _logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root = _logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel((level or "INFO").upper())


def bind_context(logger, **kwargs: Any):
    """Attach ``kwargs`` to every record of ``logger`` (``LoggerAdapter``)."""
    if not kwargs:
        return logger
    return _logging.LoggerAdapter(logger, extra=kwargs)


__all__ = ["configure_logging", "bind_context"]
