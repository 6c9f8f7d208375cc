"""
Reporting collaborator: turns pipeline results into log events and metrics.

Stages return values; only the dispatcher talks to the reporter. Swap in a
different reporter (e.g. a recording one in tests) without touching the pipeline.
"""

from typing import Protocol

import structlog

from fhir_gate.exceptions import GateError, SinkWriteError
from fhir_gate.models.document import DocumentRef
from fhir_gate.models.enums import Destination
from fhir_gate.models.outcome_models import RoutingResult
from fhir_gate.monitoring.metrics import (
    document_processing_seconds,
    documents_routed_total,
    duplicate_skips_total,
    processing_faults_total,
    sink_write_failures_total,
    validation_issues_total,
)


class Reporter(Protocol):
    """What the dispatcher reports."""

    def routed(self, result: RoutingResult, elapsed_seconds: float) -> None: ...

    def skipped(self, ref: DocumentRef) -> None: ...

    def sink_failed(self, ref: DocumentRef, error: SinkWriteError) -> None: ...

    def attempt_failed(self, ref: DocumentRef, error: Exception) -> None: ...

    def poll_failed(self, error: GateError) -> None: ...

    def cycle_finished(self, routed: int, skipped: int, pending: int) -> None: ...


class StructlogReporter:
    """Default reporter: structlog events + Prometheus metrics."""

    def __init__(self, logger=None):
        self.logger = logger or structlog.get_logger("fhir_gate.reporting")

    def routed(self, result: RoutingResult, elapsed_seconds: float) -> None:
        destination = result.destination.value
        documents_routed_total.labels(destination=destination).inc()
        document_processing_seconds.labels(destination=destination).observe(elapsed_seconds)

        record = result.record
        if record is not None and record.fault is None:
            validation_issues_total.labels(severity="error").inc(record.error_count)
            validation_issues_total.labels(severity="warning").inc(record.warning_count)
            validation_issues_total.labels(severity="information").inc(record.information_count)

        if result.fault is not None:
            processing_faults_total.labels(fault=result.fault.value).inc()
            self.logger.error(
                "Document routed to invalid after processing fault",
                document_id=result.document_id,
                fault=result.fault.value,
                diagnostic=result.diagnostic,
            )
        elif result.destination is Destination.VALID:
            self.logger.info(
                "Valid resource",
                document_id=result.document_id,
                resource_type=record.resource_type if record else None,
                warnings=record.warnings if record else [],
                information=record.information if record else [],
            )
        else:
            self.logger.error(
                "Invalid resource",
                document_id=result.document_id,
                resource_type=record.resource_type if record else None,
                error_count=record.error_count if record else None,
                warning_count=record.warning_count if record else None,
                diagnostic=result.diagnostic,
            )

    def skipped(self, ref: DocumentRef) -> None:
        duplicate_skips_total.inc()
        self.logger.debug("Skipping already handled document", document_id=ref.identifier)

    def sink_failed(self, ref: DocumentRef, error: SinkWriteError) -> None:
        sink_write_failures_total.inc()
        self.logger.warning(
            "Sink write failed, document left pending for next poll",
            document_id=ref.identifier,
            error=error.message,
            details=error.details,
        )

    def attempt_failed(self, ref: DocumentRef, error: Exception) -> None:
        self.logger.error(
            "Processing attempt failed, document left pending for next poll",
            document_id=ref.identifier,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=error,
        )

    def poll_failed(self, error: GateError) -> None:
        self.logger.error("Polling input location failed", error=error.message, details=error.details)

    def cycle_finished(self, routed: int, skipped: int, pending: int) -> None:
        if routed or pending:
            self.logger.info("Poll cycle finished", routed=routed, skipped=skipped, pending=pending)
