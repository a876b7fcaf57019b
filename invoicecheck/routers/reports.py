"""Report download router.

POST /api/download-report turns a validation result into a PDF attachment.
Responses are either the complete PDF or a small ``{"error": ...}`` JSON body.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Depends, Request, Response, status
from prometheus_client import Counter
from pydantic import ValidationError

from ..config.logging import bind_context
from ..config.monitoring import trace_operation
from ..config.settings import Settings
from ..models.validation import DownloadReportRequest, ValidationResult
from ..services.pdf_service import generate_pdf
from ..utils.errors import error_response
from ..utils.filenames import content_disposition, report_filename
from .dependencies import get_app_settings

logger = logging.getLogger(__name__)

PdfRenderer = Callable[[ValidationResult, str], Awaitable[bytes]]

UNKNOWN_INVOICE_LABEL = "Unknown"

REPORT_DOWNLOADS = Counter(
    "report_downloads_total",
    "Report download requests by outcome",
    ["outcome"],
)

router = APIRouter()


def get_pdf_renderer() -> PdfRenderer:
    return generate_pdf


def is_missing_result(value: Any) -> bool:
    """True for values a browser client treats as "no result".

    Only null, false, zero, NaN and the empty string qualify; empty objects and
    arrays are present and go on to schema validation.
    """
    if value is None or value == "" or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or math.isnan(value)
    return False


def _invalid_payload_key(exc: ValidationError) -> str:
    if any(err["loc"] and err["loc"][0] == "result" for err in exc.errors()):
        return "invalid_result"
    return "invalid_invoice_number"


@router.post("/download-report", response_class=Response)
async def download_report(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    renderer: PdfRenderer = Depends(get_pdf_renderer),
):
    log = bind_context(logger, request_id=getattr(request.state, "request_id", None))
    try:
        body = await request.json()

        if not isinstance(body, dict) or is_missing_result(body.get("result")):
            log.info("Report download requested without a validation result")
            REPORT_DOWNLOADS.labels("missing_result").inc()
            return error_response(status.HTTP_400_BAD_REQUEST, "missing_result")

        try:
            payload = DownloadReportRequest.model_validate(body)
        except ValidationError as exc:
            log.info("Rejected report payload: %s", exc.errors(include_url=False))
            key = _invalid_payload_key(exc)
            REPORT_DOWNLOADS.labels(key).inc()
            return error_response(status.HTTP_400_BAD_REQUEST, key)

        invoice_number = payload.invoice_number or None
        filename = report_filename(invoice_number, payload.result.check_id,
                                   settings.REPORT_FILENAME_MAX_LENGTH)

        with trace_operation("render_report_pdf", filename=filename):
            pdf_bytes = await renderer(payload.result, invoice_number or UNKNOWN_INVOICE_LABEL)

        REPORT_DOWNLOADS.labels("success").inc()
        return Response(
            content=pdf_bytes,
            status_code=status.HTTP_200_OK,
            media_type="application/pdf",
            headers={
                "Content-Disposition": content_disposition(filename),
                "Content-Length": str(len(pdf_bytes)),
            },
        )
    except Exception as exc:  # noqa: BLE001 - endpoint boundary, always answer with JSON
        log.error("PDF generation error: %s", exc, exc_info=True)
        REPORT_DOWNLOADS.labels("error").inc()
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "pdf_failed")


__all__ = ["router", "get_pdf_renderer", "PdfRenderer", "UNKNOWN_INVOICE_LABEL"]
