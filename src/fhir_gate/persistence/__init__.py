"""Persistence layer: input source, output sinks and the processed set."""

from fhir_gate.persistence.processed_set import (
    BaseProcessedSet,
    InMemoryProcessedSet,
    RedisProcessedSet,
    build_processed_set,
)
from fhir_gate.persistence.sinks import BaseSink, DirectorySink
from fhir_gate.persistence.sources import BaseSource, DirectorySource

__all__ = [
    "BaseProcessedSet",
    "InMemoryProcessedSet",
    "RedisProcessedSet",
    "build_processed_set",
    "BaseSink",
    "DirectorySink",
    "BaseSource",
    "DirectorySource",
]
