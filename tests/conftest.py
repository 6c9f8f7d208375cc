"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import shutil
from pathlib import Path
from typing import Callable

import pytest

from fhir_gate.config import Settings
from fhir_gate.models.document import Document, DocumentRef, ParsedResource
from fhir_gate.models.enums import Severity
from fhir_gate.models.outcome_models import Issue
from fhir_gate.validators.base import BaseValidator


class StubValidator(BaseValidator):
    """Validator returning canned issues (or raising) for every resource."""

    name = "stub"

    def __init__(self, issues: list[Issue] | None = None, error: Exception | None = None):
        self.issues = issues or []
        self.error = error
        self.calls: list[ParsedResource] = []

    def validate(self, resource: ParsedResource) -> list[Issue]:
        self.calls.append(resource)
        if self.error is not None:
            raise self.error
        return list(self.issues)


class RecordingReporter:
    """Reporter that keeps every call for assertions."""

    def __init__(self):
        self.routed_results = []
        self.skipped_refs = []
        self.sink_failures = []
        self.attempt_failures = []
        self.poll_failures = []
        self.cycles = []

    def routed(self, result, elapsed_seconds):
        self.routed_results.append(result)

    def skipped(self, ref):
        self.skipped_refs.append(ref)

    def sink_failed(self, ref, error):
        self.sink_failures.append((ref, error))

    def attempt_failed(self, ref, error):
        self.attempt_failures.append((ref, error))

    def poll_failed(self, error):
        self.poll_failures.append(error)

    def cycle_finished(self, routed, skipped, pending):
        self.cycles.append((routed, skipped, pending))


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def documents_dir(fixtures_dir: Path) -> Path:
    """Directory holding the sample FHIR documents."""
    return fixtures_dir / "documents"


@pytest.fixture
def gate_dirs(tmp_path: Path) -> dict[str, Path]:
    """Empty input/valid/invalid directories under tmp_path."""
    dirs = {name: tmp_path / name for name in ("input", "valid", "invalid")}
    for path in dirs.values():
        path.mkdir()
    return dirs


@pytest.fixture
def seeded_input(gate_dirs: dict[str, Path], documents_dir: Path) -> Path:
    """Input directory pre-filled with every sample document."""
    for doc in documents_dir.glob("*.json"):
        shutil.copy(doc, gate_dirs["input"] / doc.name)
    return gate_dirs["input"]


@pytest.fixture
def test_settings(gate_dirs: dict[str, Path]) -> Settings:
    """Test settings pointing at tmp directories.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            settings = test_settings.model_copy(update={"WORKER_CONCURRENCY": 4})
    """
    return Settings(
        APP_NAME="FHIR Gate (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        INPUT_DIR=str(gate_dirs["input"]),
        VALID_DIR=str(gate_dirs["valid"]),
        INVALID_DIR=str(gate_dirs["invalid"]),
        POLL_INTERVAL_SECONDS=0.01,
        WORKER_CONCURRENCY=1,
        PROCESSED_BACKEND="memory",
        VALIDATOR_BACKEND="schema",
        PROMETHEUS_ENABLED=False,  # Never bind the exporter port in tests
    )


@pytest.fixture
def make_document() -> Callable[..., Document]:
    """Factory fixture to create a Document from text.

    Usage:
        def test_something(make_document):
            doc = make_document('{"resourceType": "Patient"}', identifier="p.json")
    """
    def _create(text: str | bytes, identifier: str = "doc.json") -> Document:
        content = text.encode("utf-8") if isinstance(text, str) else text
        return Document(identifier=identifier, location=f"/inbox/{identifier}", content=content)

    return _create


@pytest.fixture
def make_ref() -> Callable[..., DocumentRef]:
    def _create(identifier: str = "doc.json", location: str | None = None) -> DocumentRef:
        return DocumentRef(identifier=identifier, location=location or f"/inbox/{identifier}")

    return _create


@pytest.fixture
def make_issue() -> Callable[..., Issue]:
    """Factory fixture to create an Issue."""
    def _create(
        severity: Severity = Severity.ERROR,
        location: str = "Patient.gender",
        message: str = "bad value",
    ) -> Issue:
        return Issue(severity=severity, location=location, message=message)

    return _create


@pytest.fixture
def stub_validator_factory() -> Callable[..., StubValidator]:
    return StubValidator


@pytest.fixture
def recording_reporter() -> RecordingReporter:
    return RecordingReporter()
