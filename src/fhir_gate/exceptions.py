"""
Exceptions for the validation-outcome pipeline.

Document-level failures fall into two groups:
- Routed to the invalid sink by the error handler: SourceReadError, ParseError, ValidatorFault
- Left pending for the next poll: SinkWriteError (the claim is released, nothing is recorded)

An ordinary validation failure is NOT an exception: it is an Outcome with passed=False.
"""

from typing import Any


class GateError(Exception):
    """
    Base exception for all pipeline errors.

    Carries a human-readable message (used verbatim as the routing diagnostic)
    and structured details for logging.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize gate error.

        Args:
            message: Human-readable error description
            details: Structured error data for logging/metrics
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class SourceReadError(GateError):
    """Raised when a discovered item cannot be read from the document source."""

    def __init__(self, message: str, location: str | None = None):
        details = {}
        if location:
            details["location"] = location
        super().__init__(message, details)


class ParseError(GateError):
    """
    Content does not conform to the expected document envelope.

    Raised for empty content, undecodable bytes, malformed JSON, a non-object
    top level, or a missing resourceType discriminator.
    """

    def __init__(self, message: str, raw_content: str | None = None, parse_error: str | None = None):
        """
        Initialize parse error.

        Args:
            message: Error description (becomes the routing diagnostic)
            raw_content: First 500 chars of the offending content (for debugging)
            parse_error: Underlying decoder message
        """
        details = {}
        if raw_content:
            details["content_snippet"] = raw_content[:500]
        if parse_error:
            details["parse_error"] = parse_error

        super().__init__(message, details)


class ValidatorFault(GateError):
    """
    The validator capability itself failed (an execution failure, not a finding).

    Kept distinct from ParseError so operators can tell "bad input" from
    "broken validator".
    """

    def __init__(self, message: str, validator: str | None = None, cause: str | None = None):
        details = {}
        if validator:
            details["validator"] = validator
        if cause:
            details["cause"] = cause
        super().__init__(message, details)


class SinkWriteError(GateError):
    """
    Writing a routed document or its diagnostic record failed.

    Not routed: the document stays unrecorded and is picked up again on the next poll.
    """

    def __init__(self, message: str, sink: str | None = None, document_id: str | None = None):
        details = {}
        if sink:
            details["sink"] = sink
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class ProcessedSetConflict(GateError):
    """An identifier already completed to one destination was completed to another."""

    def __init__(self, document_id: str, existing: str, attempted: str):
        super().__init__(
            f"Document '{document_id}' already completed as {existing}, refusing {attempted}",
            {"document_id": document_id, "existing": existing, "attempted": attempted},
        )
