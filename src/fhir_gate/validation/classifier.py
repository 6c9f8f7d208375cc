"""
Issue classification: the single authoritative pass/fail rule.

Stable partition of validator issues by severity:
- FATAL, ERROR -> errors (blocking)
- WARNING      -> warnings (non-blocking)
- INFORMATION  -> information (non-blocking)

passed is true iff errors is empty.
"""

from collections.abc import Iterable
from typing import Optional, assert_never

from fhir_gate.models.enums import Severity
from fhir_gate.models.outcome_models import Issue, Outcome


def classify(issues: Iterable[Issue], resource_type: Optional[str] = None) -> Outcome:
    """
    Partition issues into an Outcome, preserving validator order within each bucket.

    Args:
        issues: Issues in the order the validator emitted them
        resource_type: Discovered resource type, carried through for diagnostics

    Returns:
        Outcome with passed == (no FATAL/ERROR issue present)
    """
    errors: list[Issue] = []
    warnings: list[Issue] = []
    information: list[Issue] = []

    for issue in issues:
        severity = issue.severity
        if severity is Severity.FATAL or severity is Severity.ERROR:
            errors.append(issue)
        elif severity is Severity.WARNING:
            warnings.append(issue)
        elif severity is Severity.INFORMATION:
            information.append(issue)
        else:
            assert_never(severity)

    return Outcome(
        passed=not errors,
        errors=errors,
        warnings=warnings,
        information=information,
        resource_type=resource_type,
    )
