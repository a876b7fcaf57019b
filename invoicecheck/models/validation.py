"""Validation result schemas accepted at the report download boundary.

Field names follow the JSON produced by the validation service (camelCase),
exposed as snake_case attributes. Every field carries a default so partial
results are accepted; fields of the wrong type are rejected.
"""
from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Severity = Literal["critical", "warning", "info"]
RiskLevel = Literal["low", "medium", "high"]
Scalar = Union[str, int, float]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ValidationIssue(_CamelModel):
    id: str = ""
    rule_id: str = Field("", alias="ruleId")
    severity: Severity = "info"
    category: str = ""
    title: str = ""
    description: str = ""
    location: Optional[str] = None
    expected: Optional[Scalar] = None
    found: Optional[Scalar] = None
    difference: Optional[float] = None
    how_to_fix: str = Field("", alias="howToFix")
    impact: str = ""
    gst_law_context: Optional[str] = Field(None, alias="gstLawContext")


class ValidationCheck(_CamelModel):
    id: str = ""
    category: str = ""
    title: str = ""
    description: str = ""


class ScoreBreakdown(_CamelModel):
    total_issues: int = Field(0, alias="totalIssues")
    critical_count: int = Field(0, alias="criticalCount")
    warning_count: int = Field(0, alias="warningCount")
    info_count: int = Field(0, alias="infoCount")
    critical_deduction: float = Field(0, alias="criticalDeduction")
    warning_deduction: float = Field(0, alias="warningDeduction")
    info_deduction: float = Field(0, alias="infoDeduction")
    total_deduction: float = Field(0, alias="totalDeduction")


class ValidationResult(_CamelModel):
    check_id: str = Field("", alias="checkId")
    invoice_hash: str = Field("", alias="invoiceHash")
    health_score: float = Field(0, alias="healthScore", ge=0, le=100)
    risk_level: Optional[RiskLevel] = Field(None, alias="riskLevel")
    issues_found: List[ValidationIssue] = Field(default_factory=list, alias="issuesFound")
    checks_passed: List[ValidationCheck] = Field(default_factory=list, alias="checksPassed")
    score_breakdown: Optional[ScoreBreakdown] = Field(None, alias="scoreBreakdown")
    processing_time_ms: float = Field(0, alias="processingTimeMs")
    timestamp: str = ""

    @field_validator("check_id", mode="before")
    @classmethod
    def _none_check_id(cls, value):
        return "" if value is None else value


class DownloadReportRequest(BaseModel):
    """Body of ``POST /api/download-report``."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    result: ValidationResult
    invoice_number: Optional[str] = Field(None, alias="invoiceNumber")


__all__ = [
    "ValidationIssue",
    "ValidationCheck",
    "ScoreBreakdown",
    "ValidationResult",
    "DownloadReportRequest",
]
