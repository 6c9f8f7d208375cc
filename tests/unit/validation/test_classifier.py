"""
Unit tests for issue classification (the pass/fail rule).
"""

import random

import pytest

from fhir_gate.models.enums import Severity
from fhir_gate.models.outcome_models import Issue, Outcome
from fhir_gate.validation.classifier import classify


def _issue(severity: Severity, n: int) -> Issue:
    return Issue(severity=severity, location=f"Patient.field{n}", message=f"message {n}")


class TestClassify:
    """Test suite for classify()."""

    def test_no_issues_passes(self):
        outcome = classify([])

        assert outcome.passed is True
        assert outcome.errors == []
        assert outcome.warnings == []
        assert outcome.information == []

    @pytest.mark.parametrize("severity", [Severity.FATAL, Severity.ERROR])
    def test_blocking_severities_fail(self, severity):
        outcome = classify([_issue(severity, 1)])

        assert outcome.passed is False
        assert outcome.error_count == 1

    def test_fatal_and_error_merge_into_errors_in_emission_order(self):
        issues = [
            _issue(Severity.ERROR, 1),
            _issue(Severity.WARNING, 2),
            _issue(Severity.FATAL, 3),
            _issue(Severity.ERROR, 4),
        ]

        outcome = classify(issues)

        assert [i.location for i in outcome.errors] == [
            "Patient.field1",
            "Patient.field3",
            "Patient.field4",
        ]
        assert [i.severity for i in outcome.errors] == [Severity.ERROR, Severity.FATAL, Severity.ERROR]

    def test_partition_is_stable_not_sorted(self):
        issues = [_issue(Severity.WARNING, n) for n in (5, 1, 3)]
        issues += [_issue(Severity.INFORMATION, n) for n in (9, 7)]

        outcome = classify(issues)

        assert [i.location for i in outcome.warnings] == [
            "Patient.field5",
            "Patient.field1",
            "Patient.field3",
        ]
        assert [i.location for i in outcome.information] == ["Patient.field9", "Patient.field7"]

    def test_warnings_and_information_never_fail(self):
        issues = [_issue(Severity.WARNING, 1), _issue(Severity.INFORMATION, 2)]

        outcome = classify(issues)

        assert outcome.passed is True
        assert outcome.warning_count == 1
        assert len(outcome.information) == 1

    def test_reordering_non_blocking_issues_keeps_passed(self):
        issues = [_issue(Severity.WARNING, n) for n in range(5)]
        issues += [_issue(Severity.INFORMATION, n) for n in range(5, 10)]
        rng = random.Random(42)

        for _ in range(20):
            rng.shuffle(issues)
            assert classify(issues).passed is True

    @pytest.mark.parametrize("severity", [Severity.FATAL, Severity.ERROR])
    @pytest.mark.parametrize("position", [0, 3, 6])
    def test_inserting_blocking_issue_always_fails(self, severity, position):
        issues = [_issue(Severity.WARNING, n) for n in range(3)]
        issues += [_issue(Severity.INFORMATION, n) for n in range(3, 6)]
        issues.insert(position, _issue(severity, 99))

        assert classify(issues).passed is False

    def test_resource_type_is_carried(self):
        outcome = classify([], resource_type="Observation")

        assert outcome.resource_type == "Observation"

    def test_accepts_any_iterable(self):
        outcome = classify(_issue(Severity.ERROR, n) for n in range(2))

        assert outcome.error_count == 2


class TestOutcomeInvariant:
    """Outcome rejects passed flags that contradict its errors."""

    def test_passed_with_errors_rejected(self):
        with pytest.raises(ValueError):
            Outcome(passed=True, errors=[_issue(Severity.ERROR, 1)])

    def test_failed_without_errors_rejected(self):
        with pytest.raises(ValueError):
            Outcome(passed=False)

    def test_error_summary_lists_location_and_message(self):
        outcome = classify([
            Issue(severity=Severity.ERROR, location="Observation.status", message="required"),
            Issue(severity=Severity.FATAL, location="Observation.code", message="missing"),
        ])

        assert outcome.error_summary() == "Observation.status: required\nObservation.code: missing"
