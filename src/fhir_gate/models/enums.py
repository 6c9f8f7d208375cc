"""
Enumerations for FHIR Gate data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class Severity(str, Enum):
    """
    Severity of a single validation issue.

    Values follow the FHIR OperationOutcome issue-severity code system.
    FATAL and ERROR block routing to the valid sink; WARNING and INFORMATION never do.
    """

    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"

    @classmethod
    def from_code(cls, code: str) -> "Severity":
        """Parse a severity code case-insensitively (e.g. 'ERROR', 'error')."""
        return cls(code.strip().lower())


class Destination(str, Enum):
    """Terminal sink a document is routed to."""

    VALID = "valid"
    INVALID = "invalid"


class ProcessingState(str, Enum):
    """
    Per-identifier processing state.

    Transitions: UNSEEN -> IN_FLIGHT -> COMPLETED_VALID | COMPLETED_INVALID.
    IN_FLIGHT may fall back to UNSEEN when a sink write fails (claim released).
    COMPLETED_* states are terminal.
    """

    UNSEEN = "unseen"
    IN_FLIGHT = "in_flight"
    COMPLETED_VALID = "completed:valid"
    COMPLETED_INVALID = "completed:invalid"

    @property
    def is_completed(self) -> bool:
        return self in (ProcessingState.COMPLETED_VALID, ProcessingState.COMPLETED_INVALID)

    @classmethod
    def completed(cls, destination: Destination) -> "ProcessingState":
        """Terminal state for a destination."""
        if destination is Destination.VALID:
            return cls.COMPLETED_VALID
        return cls.COMPLETED_INVALID


class FaultKind(str, Enum):
    """
    Why a processing attempt failed before producing a validation outcome.

    Distinguishes bad input (PARSE_ERROR) from a broken validator (VALIDATOR_FAULT)
    in diagnostics and metrics.
    """

    READ_ERROR = "read_error"
    PARSE_ERROR = "parse_error"
    VALIDATOR_FAULT = "validator_fault"
    UNEXPECTED_ERROR = "unexpected_error"
