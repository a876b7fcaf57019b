"""PDF Service

Renders a validation report to PDF bytes with fpdf2. Rendering is CPU bound and
runs in the threadpool so the event loop stays free while a report is drawn.
Core fonts are latin-1 only; text outside that range is replaced, never dropped
from the layout.
"""
from __future__ import annotations

from datetime import datetime, UTC
from typing import Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos
from starlette.concurrency import run_in_threadpool

from ..models.validation import ValidationResult
from ..utils.errors import ReportGenerationError
from .report_builder import ReportItem, ReportSection, StructuredReport, build_report

FONT = "Helvetica"

RISK_COLORS = {
    "low": (22, 163, 74),
    "medium": (202, 138, 4),
    "high": (220, 38, 38),
}
SECTION_COLORS = {
    "critical": (220, 38, 38),
    "warning": (202, 138, 4),
    "passed": (22, 163, 74),
}
_MUTED = (100, 116, 139)
_TEXT = (15, 23, 42)


def _latin1(text) -> str:
    return str(text).encode("latin-1", "replace").decode("latin-1")


class ReportPDF(FPDF):
    def __init__(self, site_name: str = "InvoiceCheck.in"):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.site_name = site_name
        self.set_auto_page_break(auto=True, margin=18)
        self.set_title("GST Invoice Validation Report")
        self.set_creator(site_name)

    def header(self):  # noqa: D401 - fpdf hook
        self.set_font(FONT, "B", 10)
        self.set_text_color(*_MUTED)
        self.cell(0, 8, _latin1(self.site_name), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(2)

    def footer(self):  # noqa: D401 - fpdf hook
        self.set_y(-12)
        self.set_font(FONT, "", 8)
        self.set_text_color(*_MUTED)
        self.cell(0, 6, f"Page {self.page_no()}", align="C")

    def line_text(self, text: str, size: int = 10, style: str = "",
                  color: Tuple[int, int, int] = _TEXT, height: float = 6) -> None:
        self.set_font(FONT, style, size)
        self.set_text_color(*color)
        self.multi_cell(0, height, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def _draw_summary(pdf: ReportPDF, report: StructuredReport, invoice_label: str) -> None:
    s = report.summary
    pdf.line_text("GST Invoice Validation Report", size=18, style="B", height=10)
    pdf.line_text(f"Invoice: {invoice_label}", size=11)
    if s.check_id:
        pdf.line_text(f"Check ID: {s.check_id}", size=10, color=_MUTED)
    if report.generated_at:
        pdf.line_text(f"Validated at: {report.generated_at}", size=10, color=_MUTED)
    pdf.ln(3)

    risk_color = RISK_COLORS.get(s.risk_level, _TEXT)
    pdf.line_text(f"Health Score: {s.health_score:g}/100", size=14, style="B", color=risk_color, height=8)
    pdf.line_text(f"Risk level: {s.risk_level}", size=11, color=risk_color)
    pdf.line_text(s.verdict, size=11)
    pdf.line_text(
        f"{s.total_issues} issue(s): {s.critical_count} critical, {s.warning_count} warning. "
        f"{s.passed_count} check(s) passed. Processed in {s.processing_time_ms:g}ms.",
        size=10, color=_MUTED,
    )
    pdf.ln(4)


def _comparison_line(item: ReportItem) -> str:
    parts = []
    if item.expected is not None:
        parts.append(f"Expected: {item.expected}")
    if item.found is not None:
        parts.append(f"Found: {item.found}")
    if item.difference is not None:
        parts.append(f"Difference: {item.difference:g}")
    return "    ".join(parts)


def _draw_item(pdf: ReportPDF, index: int, item: ReportItem) -> None:
    pdf.line_text(f"{index}. {item.title}", size=11, style="B")
    if item.description:
        pdf.line_text(item.description, size=10)
    if item.location:
        pdf.line_text(f"Location: {item.location}", size=9, color=_MUTED)
    comparison = _comparison_line(item)
    if comparison:
        pdf.line_text(comparison, size=9, color=_MUTED)
    if item.how_to_fix:
        pdf.line_text(f"Fix: {item.how_to_fix}", size=9)
    if item.impact:
        pdf.line_text(f"Impact: {item.impact}", size=9, color=_MUTED)
    if item.gst_law_context:
        pdf.line_text(f"Law: {item.gst_law_context}", size=9, color=_MUTED)
    pdf.ln(1)


def _draw_section(pdf: ReportPDF, section: ReportSection) -> None:
    pdf.line_text(section.title, size=13, style="B",
                  color=SECTION_COLORS.get(section.type, _TEXT), height=8)
    for idx, item in enumerate(section.items, start=1):
        _draw_item(pdf, idx, item)
    pdf.ln(3)


def render_report_pdf(result: ValidationResult, invoice_label: str,
                      site_name: str = "InvoiceCheck.in") -> bytes:
    """Render the full report synchronously and return the PDF bytes."""
    try:
        report = build_report(result)
        pdf = ReportPDF(site_name=site_name)
        pdf.add_page()
        _draw_summary(pdf, report, invoice_label)
        for section in report.sections:
            _draw_section(pdf, section)
        pdf.line_text(report.disclaimer, size=8, style="I", color=_MUTED, height=4)
        pdf.line_text(f"Generated: {datetime.now(UTC).isoformat(timespec='seconds')}",
                      size=8, color=_MUTED, height=4)
        return bytes(pdf.output())
    except Exception as exc:
        raise ReportGenerationError(str(exc)) from exc


async def generate_pdf(result: ValidationResult, invoice_label: str) -> bytes:
    """Awaitable renderer used by the download endpoint."""
    return await run_in_threadpool(render_report_pdf, result, invoice_label)


__all__ = ["ReportPDF", "render_report_pdf", "generate_pdf"]
