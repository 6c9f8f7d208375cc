"""Custom Prometheus metrics for FHIR Gate.

Exposed by the exporter started in main (METRICS_PORT) and updated only by the
reporter, never from inside pipeline stages.
Alert rules should be configured for:
- processing_faults_total{fault="validator_fault"} (broken validator, not bad input)
- sink_write_failures_total (documents stuck pending)
- documents_routed_total{destination="invalid"} (upstream data quality)
"""

from prometheus_client import Counter, Histogram

# === Routing Metrics ===

documents_routed_total = Counter(
    "documents_routed_total",
    "Total documents routed to a terminal sink",
    ["destination"],
)
"""
Routed documents by destination.

Labels:
- destination: valid, invalid
"""

validation_issues_total = Counter(
    "validation_issues_total",
    "Total validation issues reported by the validator, by severity",
    ["severity"],
)
"""
Validator findings by severity.

Labels:
- severity: error (fatal included), warning, information
"""

# === Failure Metrics ===

processing_faults_total = Counter(
    "processing_faults_total",
    "Processing attempts that failed before producing a validation outcome",
    ["fault"],
)
"""
Faulted attempts (all routed to the invalid sink).

Labels:
- fault: read_error, parse_error, validator_fault, unexpected_error

Alert thresholds:
- WARN: any validator_fault (validator backend unhealthy)
"""

sink_write_failures_total = Counter(
    "sink_write_failures_total",
    "Sink write failures (document left pending for the next poll)",
)
"""
Sink write failures.

Each increment is one attempt; a persistently unwritable sink keeps increasing
this counter on every poll with no forward progress.

Alert thresholds:
- CRITICAL: increasing for more than 5 minutes
"""

duplicate_skips_total = Counter(
    "duplicate_skips_total",
    "Discovered items skipped because they were already completed or in flight",
)

# === Latency Metrics ===

document_processing_seconds = Histogram(
    "document_processing_seconds",
    "Time from claim to terminal routing for one document",
    ["destination"],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0],
)
