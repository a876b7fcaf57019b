from .validation import (
    DownloadReportRequest,
    ScoreBreakdown,
    ValidationCheck,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "DownloadReportRequest",
    "ScoreBreakdown",
    "ValidationCheck",
    "ValidationIssue",
    "ValidationResult",
]
