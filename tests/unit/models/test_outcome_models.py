"""
Unit tests for outcome models and enums.
"""

import json

import pytest
from pydantic import ValidationError

from fhir_gate.models.document import Document, DocumentRef
from fhir_gate.models.enums import Destination, FaultKind, ProcessingState, Severity
from fhir_gate.models.outcome_models import DiagnosticRecord, Fault, Issue, RoutingResult
from fhir_gate.validation.classifier import classify


class TestSeverity:
    @pytest.mark.parametrize("code,expected", [
        ("error", Severity.ERROR),
        ("FATAL", Severity.FATAL),
        (" Warning ", Severity.WARNING),
        ("information", Severity.INFORMATION),
    ])
    def test_from_code(self, code, expected):
        assert Severity.from_code(code) is expected

    def test_from_code_rejects_unknown(self):
        with pytest.raises(ValueError):
            Severity.from_code("critical")


class TestProcessingState:
    def test_completed_states(self):
        assert ProcessingState.completed(Destination.VALID) is ProcessingState.COMPLETED_VALID
        assert ProcessingState.completed(Destination.INVALID) is ProcessingState.COMPLETED_INVALID

    def test_is_completed(self):
        assert not ProcessingState.UNSEEN.is_completed
        assert not ProcessingState.IN_FLIGHT.is_completed
        assert ProcessingState.COMPLETED_VALID.is_completed
        assert ProcessingState.COMPLETED_INVALID.is_completed


class TestDocument:
    def test_frozen(self):
        document = Document(identifier="a.json", location="/in/a.json", content=b"{}")

        with pytest.raises(ValidationError):
            document.content = b"changed"

    def test_with_resource_type_returns_copy(self):
        document = Document(identifier="a.json", location="/in/a.json", content=b"{}")

        typed = document.with_resource_type("Patient")

        assert typed.resource_type == "Patient"
        assert document.resource_type is None
        assert typed.content == document.content

    def test_ref_requires_identifier(self):
        with pytest.raises(ValidationError):
            DocumentRef(identifier="", location="/in/")


class TestDiagnosticRecord:
    """Companion record serialisation."""

    def test_from_outcome(self):
        outcome = classify(
            [
                Issue(severity=Severity.ERROR, location="Patient.gender", message="not in value set"),
                Issue(severity=Severity.WARNING, location="Patient", message="dom-6"),
                Issue(severity=Severity.INFORMATION, location="Patient", message="note"),
            ],
            resource_type="Patient",
        )

        record = DiagnosticRecord.from_outcome("p.json", outcome)

        assert record.passed is False
        assert record.error_count == 1
        assert record.warning_count == 1
        assert record.information_count == 1
        assert record.summary == "Patient.gender: not in value set"
        assert record.warnings == ["Patient: dom-6"]
        assert record.information == ["Patient: note"]
        assert record.resource_type == "Patient"
        assert record.fault is None

    def test_from_fault(self):
        fault = Fault(kind=FaultKind.VALIDATOR_FAULT, message="validator fault: timed out")

        record = DiagnosticRecord.from_fault("p.json", fault)

        assert record.passed is False
        assert record.error_count == 1
        assert record.warning_count == 0
        assert record.summary == "validator fault: timed out"
        assert record.fault is FaultKind.VALIDATOR_FAULT

    def test_json_uses_camel_case_keys(self):
        record = DiagnosticRecord.from_outcome("p.json", classify([], resource_type="Patient"))

        data = json.loads(record.to_json())

        for key in ("documentId", "passed", "errorCount", "warningCount", "summary", "routedAt"):
            assert key in data
        assert data["documentId"] == "p.json"
        assert data["resourceType"] == "Patient"

    def test_accepts_alias_and_field_names(self):
        by_alias = DiagnosticRecord.model_validate(
            {"documentId": "a", "passed": True, "errorCount": 0, "warningCount": 2}
        )
        by_name = DiagnosticRecord(document_id="a", passed=True, error_count=0, warning_count=2)

        assert by_alias.document_id == by_name.document_id == "a"
        assert by_alias.warning_count == 2

    def test_counts_non_negative(self):
        with pytest.raises(ValidationError):
            DiagnosticRecord(document_id="a", passed=False, error_count=-1, warning_count=0)


class TestRoutingResult:
    def test_passed_follows_destination(self):
        assert RoutingResult(document_id="a", destination=Destination.VALID).passed is True
        assert RoutingResult(document_id="a", destination=Destination.INVALID).passed is False
