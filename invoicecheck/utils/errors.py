"""Centralized error response helpers and exception utilities.

Every error leaving the service has the shape ``{"error": "<message>"}``.
Messages are deliberately generic for server faults so internals never leak.
"""
from __future__ import annotations
from typing import Any, Dict

from fastapi.responses import JSONResponse

ERROR_MESSAGES = {
    "missing_result": "Missing validation result",
    "invalid_result": "Invalid validation result",
    "invalid_invoice_number": "Invalid invoice number",
    "pdf_failed": "Failed to generate PDF",
    "internal": "Internal server error",
}


def error_payload(message: str) -> Dict[str, Any]:
    return {"error": message}


def error_response(status_code: int, key: str) -> JSONResponse:
    """JSONResponse carrying the registered message for ``key``."""
    return JSONResponse(status_code=status_code, content=error_payload(ERROR_MESSAGES[key]))


class DomainError(Exception):
    """Base domain error storing standardized fields."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class ReportGenerationError(DomainError):
    def __init__(self, reason: str):
        super().__init__("pdf_failed", f"PDF generation failed: {reason}")


__all__ = [
    "ERROR_MESSAGES",
    "error_payload",
    "error_response",
    "DomainError",
    "ReportGenerationError",
]
