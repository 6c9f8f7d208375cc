"""
Pydantic data models for FHIR Gate.

Includes:
- Enums (Severity, Destination, ProcessingState, FaultKind)
- Input models (DocumentRef, Document, ParsedResource)
- Outcome models (Issue, Outcome, Fault, DiagnosticRecord, RoutingResult)
"""

from fhir_gate.models.enums import Destination, FaultKind, ProcessingState, Severity
from fhir_gate.models.document import Document, DocumentRef, ParsedResource
from fhir_gate.models.outcome_models import (
    DiagnosticRecord,
    Fault,
    Issue,
    Outcome,
    RoutingResult,
)

__all__ = [
    # Enums
    "Severity",
    "Destination",
    "ProcessingState",
    "FaultKind",
    # Input models
    "DocumentRef",
    "Document",
    "ParsedResource",
    # Outcome models
    "Issue",
    "Outcome",
    "Fault",
    "DiagnosticRecord",
    "RoutingResult",
]
