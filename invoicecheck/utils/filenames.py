"""Download filename helpers for generated reports."""
from __future__ import annotations

import re
from typing import Optional

SAFE_NAME_MAX_LENGTH = 50
FALLBACK_NAME = "report"
REPORT_FILENAME_PREFIX = "invoice-report-"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def clamp_name_length(max_length: int) -> int:
    """Bound a configured length to ``1..SAFE_NAME_MAX_LENGTH``."""
    return max(1, min(max_length, SAFE_NAME_MAX_LENGTH))


def safe_name(value: str, max_length: int = SAFE_NAME_MAX_LENGTH) -> str:
    """Replace every character outside ``[A-Za-z0-9_-]`` with ``_`` and cap the length.

    >>> safe_name("INV/2024#007!!")
    'INV_2024_007__'
    """
    return _UNSAFE_CHARS.sub("_", value)[:clamp_name_length(max_length)]


def report_name_source(invoice_number: Optional[str], check_id: Optional[str]) -> str:
    """Pick the first non-empty of invoice number, check id, then ``"report"``."""
    return invoice_number or check_id or FALLBACK_NAME


def report_filename(invoice_number: Optional[str], check_id: Optional[str],
                    max_length: int = SAFE_NAME_MAX_LENGTH) -> str:
    stem = safe_name(report_name_source(invoice_number, check_id), max_length)
    return f"{REPORT_FILENAME_PREFIX}{stem}.pdf"


def content_disposition(filename: str) -> str:
    return f'attachment; filename="{filename}"'


__all__ = [
    "SAFE_NAME_MAX_LENGTH",
    "FALLBACK_NAME",
    "clamp_name_length",
    "safe_name",
    "report_name_source",
    "report_filename",
    "content_disposition",
]
