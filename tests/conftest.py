"""Test configuration and fixtures.

The application is always built through ``create_application`` with explicit,
non-production settings so no test can reach the monitoring vendor. The PDF
renderer is swapped through FastAPI dependency overrides where a test only
cares about the HTTP contract.
"""

import os
from typing import AsyncGenerator, List, Tuple

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Flag test mode before the package builds its module-level app
os.environ.setdefault("APP_ENV", "test")

from invoicecheck.config.monitoring import reset_server_monitoring  # noqa: E402
from invoicecheck.config.settings import Settings  # noqa: E402
from invoicecheck.main import create_application  # noqa: E402
from invoicecheck.models.validation import ValidationResult  # noqa: E402
from invoicecheck.routers.reports import get_pdf_renderer  # noqa: E402

FAKE_PDF = b"%PDF-1.4\n%fake report\n%%EOF"


class RecordingRenderer:
    """Stand-in renderer that records every call."""

    def __init__(self, payload: bytes = FAKE_PDF, error: Exception | None = None):
        self.payload = payload
        self.error = error
        self.calls: List[Tuple[ValidationResult, str]] = []

    async def __call__(self, result: ValidationResult, invoice_label: str) -> bytes:
        self.calls.append((result, invoice_label))
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(ENVIRONMENT="test", SENTRY_DSN="https://public@o0.ingest.sentry.io/0")


@pytest.fixture
def app(settings):
    return create_application(settings)


@pytest.fixture(autouse=True)
def _reset_monitoring():
    reset_server_monitoring()
    yield
    reset_server_monitoring()


@pytest.fixture
def sample_result() -> dict:
    return {
        "checkId": "IC-2025-ABC123XYZ",
        "invoiceHash": "4f2a9c",
        "healthScore": 80,
        "riskLevel": "high",
        "issuesFound": [
            {
                "id": "issue-1",
                "ruleId": "GSTIN_FORMAT",
                "severity": "critical",
                "category": "GSTIN",
                "title": "Invalid supplier GSTIN",
                "description": "Supplier GSTIN does not match the 15 character format.",
                "location": "Supplier details",
                "expected": "15 characters",
                "found": "27ABCDE1234F1Z",
                "howToFix": "Copy the GSTIN from the GST portal.",
                "impact": "Buyer cannot claim ITC.",
                "gstLawContext": "Rule 46(a) CGST Rules",
            },
            {
                "id": "issue-2",
                "ruleId": "ROUNDING",
                "severity": "warning",
                "category": "Totals",
                "title": "Total differs by rounding",
                "description": "Invoice total is off by Rs. 0.40.",
                "expected": 1180,
                "found": 1180.4,
                "difference": 0.4,
                "howToFix": "Round line totals before summing.",
                "impact": "Minor mismatch in GSTR-1.",
            },
        ],
        "checksPassed": [
            {"id": "chk-1", "category": "Dates", "title": "Invoice date valid",
             "description": "Invoice date is not in the future."},
        ],
        "scoreBreakdown": {
            "totalIssues": 2, "criticalCount": 1, "warningCount": 1, "infoCount": 0,
            "criticalDeduction": 15, "warningDeduction": 5, "infoDeduction": 0,
            "totalDeduction": 20,
        },
        "processingTimeMs": 42,
        "timestamp": "2025-01-15T10:30:00.000Z",
    }


@pytest.fixture
def renderer(app) -> RecordingRenderer:
    fake = RecordingRenderer()
    app.dependency_overrides[get_pdf_renderer] = lambda: fake
    return fake


@pytest.fixture
def failing_renderer(app) -> RecordingRenderer:
    fake = RecordingRenderer(error=RuntimeError("renderer exploded"))
    app.dependency_overrides[get_pdf_renderer] = lambda: fake
    return fake


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:  # noqa: D401
    """Async HTTP client for tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
