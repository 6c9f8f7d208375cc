"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

from unittest.mock import Mock

import pytest

from fhir_gate.exceptions import SinkWriteError
from fhir_gate.persistence.sinks import BaseSink


class MemorySink(BaseSink):
    """In-memory sink; fail_times > 0 makes the next N writes raise SinkWriteError."""

    def __init__(self, name: str, fail_times: int = 0):
        self.name = name
        self.fail_times = fail_times
        self.documents: dict[str, bytes] = {}
        self.records: dict = {}
        self.write_calls = 0

    def _maybe_fail(self, document_id: str) -> None:
        self.write_calls += 1
        if self.fail_times > 0:
            self.fail_times -= 1
            raise SinkWriteError("disk full", sink=self.name, document_id=document_id)

    def write(self, document_id, content, record):
        self._maybe_fail(document_id)
        self.documents[document_id] = content
        self.records[document_id] = record

    def write_record(self, document_id, record):
        self._maybe_fail(document_id)
        self.records[document_id] = record

    def discard(self, document_id):
        self.documents.pop(document_id, None)
        self.records.pop(document_id, None)


@pytest.fixture
def valid_sink() -> MemorySink:
    return MemorySink("valid")


@pytest.fixture
def invalid_sink() -> MemorySink:
    return MemorySink("invalid")


@pytest.fixture
def mock_redis():
    """Mock Redis client for unit tests (sync, dict-backed SET NX semantics)."""
    store: dict[str, str] = {}

    def _set(name, value, nx=False, ex=None):
        if nx and name in store:
            return None
        store[name] = value
        return True

    mock = Mock()
    mock.store = store
    mock.set = Mock(side_effect=_set)
    mock.get = Mock(side_effect=lambda name: store.get(name))
    mock.delete = Mock(side_effect=lambda name: 1 if store.pop(name, None) is not None else 0)
    return mock


@pytest.fixture
def memory_sink_factory():
    """MemorySink class, for tests that need a failing sink."""
    return MemorySink
