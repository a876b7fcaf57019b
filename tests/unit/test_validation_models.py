import pytest
from pydantic import ValidationError

from invoicecheck.models.validation import DownloadReportRequest, ValidationResult


def test_camel_case_fields_are_mapped(sample_result):
    result = ValidationResult.model_validate(sample_result)
    assert result.check_id == "IC-2025-ABC123XYZ"
    assert result.health_score == 80
    assert result.issues_found[0].rule_id == "GSTIN_FORMAT"
    assert result.score_breakdown.total_deduction == 20


def test_partial_result_gets_defaults():
    result = ValidationResult.model_validate({"healthScore": 97})
    assert result.check_id == ""
    assert result.issues_found == []
    assert result.risk_level is None


def test_unknown_fields_are_preserved():
    result = ValidationResult.model_validate({"checkId": "C", "source": "ocr"})
    assert result.model_extra == {"source": "ocr"}


def test_null_check_id_becomes_empty():
    assert ValidationResult.model_validate({"checkId": None, "healthScore": 1}).check_id == ""


@pytest.mark.parametrize("payload", [
    {"healthScore": 140},
    {"issuesFound": [{"severity": "fatal"}]},
    {"checksPassed": "all"},
])
def test_wrong_shapes_rejected(payload):
    with pytest.raises(ValidationError):
        ValidationResult.model_validate(payload)


def test_request_coerces_numeric_invoice_number(sample_result):
    req = DownloadReportRequest.model_validate({"result": sample_result, "invoiceNumber": 17})
    assert req.invoice_number == "17"


def test_request_invoice_number_optional(sample_result):
    assert DownloadReportRequest.model_validate({"result": sample_result}).invoice_number is None
