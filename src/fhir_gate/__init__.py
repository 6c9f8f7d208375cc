"""
FHIR Gate: unattended validation gate for clinical-resource JSON documents.

Watches an input location, validates each document and routes it to exactly one of:
- valid sink (document unchanged, non-blocking annotations in a companion record)
- invalid sink (document unchanged, diagnostic record with the error summary)

Architecture: polling dispatcher + pluggable validator + idempotent sinks + processed-set claims
"""

__version__ = "0.1.0"
