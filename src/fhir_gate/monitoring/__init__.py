"""Monitoring and metrics instrumentation for FHIR Gate.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from fhir_gate.monitoring.metrics import (
    document_processing_seconds,
    documents_routed_total,
    duplicate_skips_total,
    processing_faults_total,
    sink_write_failures_total,
    validation_issues_total,
)

__all__ = [
    "documents_routed_total",
    "validation_issues_total",
    "processing_faults_total",
    "sink_write_failures_total",
    "duplicate_skips_total",
    "document_processing_seconds",
]
