"""Structured report builder.

Turns a ValidationResult into the sectioned report consumed by the PDF renderer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..models.validation import ValidationIssue, ValidationResult

DISCLAIMER = (
    "This validation is based on user-entered data. Verify with a qualified CA "
    "before GST filing. Not a substitute for professional tax advice. "
    "Maximum liability: Rs. 99."
)


@dataclass
class ReportItem:
    title: str
    description: str
    severity: Optional[str] = None
    location: Optional[str] = None
    expected: Optional[Union[str, int, float]] = None
    found: Optional[Union[str, int, float]] = None
    difference: Optional[float] = None
    how_to_fix: Optional[str] = None
    impact: Optional[str] = None
    gst_law_context: Optional[str] = None


@dataclass
class ReportSection:
    title: str
    type: str  # critical | warning | passed
    items: List[ReportItem] = field(default_factory=list)


@dataclass
class ReportSummary:
    check_id: str
    health_score: float
    risk_level: str
    total_issues: int
    critical_count: int
    warning_count: int
    passed_count: int
    processing_time_ms: float
    verdict: str


@dataclass
class StructuredReport:
    summary: ReportSummary
    sections: List[ReportSection]
    disclaimer: str
    generated_at: str


def get_verdict(score: float) -> str:
    if score >= 95:
        return "Excellent! Invoice is GST-compliant and ready for submission."
    if score >= 85:
        return "Good overall, but fix the warnings before filing."
    if score >= 70:
        return "Several issues found. Fix critical issues before submitting."
    if score >= 50:
        return "Significant problems detected. Invoice needs major corrections."
    return "Invoice has critical compliance failures. Do NOT submit without fixing all issues."


def _issue_item(issue: ValidationIssue) -> ReportItem:
    return ReportItem(
        title=issue.title,
        description=issue.description,
        severity=issue.severity,
        location=issue.location,
        expected=issue.expected,
        found=issue.found,
        difference=issue.difference,
        how_to_fix=issue.how_to_fix or None,
        impact=issue.impact or None,
        gst_law_context=issue.gst_law_context,
    )


def build_report(result: ValidationResult) -> StructuredReport:
    """Group issues by severity; critical and warning sections only when non-empty."""
    critical = [i for i in result.issues_found if i.severity == "critical"]
    warnings = [i for i in result.issues_found if i.severity == "warning"]

    sections: List[ReportSection] = []
    if critical:
        sections.append(ReportSection(
            title=f"Critical Issues ({len(critical)})",
            type="critical",
            items=[_issue_item(i) for i in critical],
        ))
    if warnings:
        sections.append(ReportSection(
            title=f"Warnings ({len(warnings)})",
            type="warning",
            items=[_issue_item(i) for i in warnings],
        ))
    sections.append(ReportSection(
        title=f"Checks Passed ({len(result.checks_passed)})",
        type="passed",
        items=[ReportItem(title=c.title, description=c.description) for c in result.checks_passed],
    ))

    summary = ReportSummary(
        check_id=result.check_id,
        health_score=result.health_score,
        risk_level=result.risk_level or "unknown",
        total_issues=len(result.issues_found),
        critical_count=len(critical),
        warning_count=len(warnings),
        passed_count=len(result.checks_passed),
        processing_time_ms=result.processing_time_ms,
        verdict=get_verdict(result.health_score),
    )
    return StructuredReport(
        summary=summary,
        sections=sections,
        disclaimer=DISCLAIMER,
        generated_at=result.timestamp,
    )


__all__ = [
    "DISCLAIMER",
    "ReportItem",
    "ReportSection",
    "ReportSummary",
    "StructuredReport",
    "get_verdict",
    "build_report",
]
