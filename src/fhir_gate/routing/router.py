"""
Router: move a validated document to exactly one sink.

- passed     -> valid sink, diagnostic None (warnings/information kept as annotations)
- not passed -> invalid sink, diagnostic = error summary + counts
- fault      -> invalid sink, diagnostic = fault message

Document bytes are never altered; the diagnostic record is written out-of-band.
Any copy of the identifier left in the other sink by an earlier failed attempt
is removed before writing.
"""

from typing import Optional

from fhir_gate.models.document import Document
from fhir_gate.models.enums import Destination
from fhir_gate.models.outcome_models import DiagnosticRecord, Fault, Outcome, RoutingResult
from fhir_gate.persistence.sinks import BaseSink


def format_diagnostic(outcome: Outcome) -> str:
    """
    Operator-facing diagnostic for a failed outcome.

    One '<location>: <message>' line per error, followed by the counts.
    """
    counts = f"errors={outcome.error_count} warnings={outcome.warning_count}"
    summary = outcome.error_summary()
    return f"{summary}\n{counts}" if summary else counts


class Router:
    """Route outcomes and faults to the valid/invalid sinks."""

    def __init__(self, valid_sink: BaseSink, invalid_sink: BaseSink):
        self.valid_sink = valid_sink
        self.invalid_sink = invalid_sink

    def route(self, document: Document, outcome: Outcome) -> RoutingResult:
        """
        Write the document to the sink chosen by outcome.passed.

        Raises:
            SinkWriteError: If the sink write fails (document stays unrouted)
        """
        record = DiagnosticRecord.from_outcome(document.identifier, outcome)

        if outcome.passed:
            self.invalid_sink.discard(document.identifier)
            self.valid_sink.write(document.identifier, document.content, record)
            return RoutingResult(
                document_id=document.identifier,
                destination=Destination.VALID,
                diagnostic=None,
                record=record,
            )

        self.valid_sink.discard(document.identifier)
        self.invalid_sink.write(document.identifier, document.content, record)
        return RoutingResult(
            document_id=document.identifier,
            destination=Destination.INVALID,
            diagnostic=format_diagnostic(outcome),
            record=record,
        )

    def route_fault(self, document_id: str, content: Optional[bytes], fault: Fault) -> RoutingResult:
        """
        Route a failed processing attempt to the invalid sink.

        Args:
            document_id: Identifier of the failed item
            content: Raw bytes if they were read, None for read failures (record only)
            fault: Failure value; its message becomes the diagnostic

        Raises:
            SinkWriteError: If the sink write fails
        """
        record = DiagnosticRecord.from_fault(document_id, fault)
        self.valid_sink.discard(document_id)
        if content is None:
            self.invalid_sink.write_record(document_id, record)
        else:
            self.invalid_sink.write(document_id, content, record)

        return RoutingResult(
            document_id=document_id,
            destination=Destination.INVALID,
            diagnostic=fault.message,
            fault=fault.kind,
            record=record,
        )
