"""
Outcome data models produced by the validation pipeline.

These models carry a document from "validated" to "routed":
Issue (validator finding) -> Outcome (classified) -> RoutingResult (terminal),
with Fault as the explicit failure value and DiagnosticRecord as the companion
record written next to every routed document.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fhir_gate.models.enums import Destination, FaultKind, Severity


class Issue(BaseModel):
    """A single validation finding. Produced by a validator, never mutated."""

    model_config = ConfigDict(frozen=True)

    severity: Severity = Field(..., description="fatal | error | warning | information")
    location: str = Field(..., description="FHIR-style path, e.g. 'Observation.status'")
    message: str = Field(..., description="Human-readable finding")

    def render(self) -> str:
        """Render as '<location>: <message>'."""
        return f"{self.location}: {self.message}"


class Outcome(BaseModel):
    """
    Classified result of validating one document.

    Invariant: passed == (errors is empty). FATAL and ERROR issues both land in errors.
    """

    model_config = ConfigDict(frozen=True)

    passed: bool
    errors: list[Issue] = Field(default_factory=list)
    warnings: list[Issue] = Field(default_factory=list)
    information: list[Issue] = Field(default_factory=list)
    resource_type: Optional[str] = None

    @model_validator(mode="after")
    def _check_passed_matches_errors(self) -> "Outcome":
        if self.passed != (len(self.errors) == 0):
            raise ValueError(
                f"passed={self.passed} contradicts {len(self.errors)} error issue(s)"
            )
        return self

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def error_summary(self) -> str:
        """Newline-joined '<location>: <message>' for every error, in validator order."""
        return "\n".join(issue.render() for issue in self.errors)


class Fault(BaseModel):
    """
    Explicit failure value for a processing attempt that produced no Outcome.

    Returned by ValidationStage.evaluate() instead of raising.
    """

    model_config = ConfigDict(frozen=True)

    kind: FaultKind
    message: str
    details: dict = Field(default_factory=dict)


class DiagnosticRecord(BaseModel):
    """
    Companion record written beside every routed document.

    Serialised with camelCase keys (model_dump(by_alias=True)); the first five
    fields form the stable operator-facing contract.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    document_id: str = Field(..., alias="documentId")
    passed: bool
    error_count: int = Field(..., ge=0, alias="errorCount")
    warning_count: int = Field(..., ge=0, alias="warningCount")
    summary: str = ""

    information_count: int = Field(default=0, ge=0, alias="informationCount")
    resource_type: Optional[str] = Field(default=None, alias="resourceType")
    fault: Optional[FaultKind] = None
    warnings: list[str] = Field(default_factory=list)
    information: list[str] = Field(default_factory=list)
    routed_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        alias="routedAt",
    )

    @classmethod
    def from_outcome(cls, document_id: str, outcome: Outcome) -> "DiagnosticRecord":
        return cls(
            document_id=document_id,
            passed=outcome.passed,
            error_count=outcome.error_count,
            warning_count=outcome.warning_count,
            summary=outcome.error_summary(),
            information_count=len(outcome.information),
            resource_type=outcome.resource_type,
            warnings=[issue.render() for issue in outcome.warnings],
            information=[issue.render() for issue in outcome.information],
        )

    @classmethod
    def from_fault(cls, document_id: str, fault: Fault) -> "DiagnosticRecord":
        return cls(
            document_id=document_id,
            passed=False,
            error_count=1,
            warning_count=0,
            summary=fault.message,
            fault=fault.kind,
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


class RoutingResult(BaseModel):
    """
    Terminal routing decision for one document.

    Once produced and recorded in the processed set, the document is fully handled.
    diagnostic is None for valid documents.
    """

    model_config = ConfigDict(frozen=True)

    document_id: str
    destination: Destination
    diagnostic: Optional[str] = None
    fault: Optional[FaultKind] = None
    record: Optional[DiagnosticRecord] = None

    @property
    def passed(self) -> bool:
        return self.destination is Destination.VALID
