"""
Sinks: terminal destinations for routed documents.

Each routed document is written byte-for-byte unchanged, with its diagnostic
record stored out-of-band in a companion file:

    <sink>/<document_id>
    <sink>/<document_id>.diagnostic.json

Writes are atomic (temp file + os.replace) and idempotent: re-routing the same
identifier after a crash overwrites in place and never duplicates.
"""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import structlog

from fhir_gate.exceptions import SinkWriteError
from fhir_gate.models.outcome_models import DiagnosticRecord

logger = structlog.get_logger(__name__)

DEFAULT_DIAGNOSTIC_SUFFIX = ".diagnostic.json"


class BaseSink(ABC):
    """Write target accepting a document plus its diagnostic record."""

    name: str = "sink"

    @abstractmethod
    def write(self, document_id: str, content: bytes, record: DiagnosticRecord) -> None:
        """
        Store a document and its companion record.

        Raises:
            SinkWriteError: If either write fails
        """

    @abstractmethod
    def write_record(self, document_id: str, record: DiagnosticRecord) -> None:
        """
        Store only the companion record (document content unavailable).

        Raises:
            SinkWriteError: If the write fails
        """

    @abstractmethod
    def discard(self, document_id: str) -> None:
        """
        Remove any stored copy of a document and its record (no-op if absent).

        Raises:
            SinkWriteError: If an existing file cannot be removed
        """


class DirectorySink(BaseSink):
    """Directory-backed sink with atomic, idempotent writes."""

    def __init__(
        self,
        directory: str | Path,
        name: str,
        diagnostic_suffix: str = DEFAULT_DIAGNOSTIC_SUFFIX,
    ):
        """
        Initialize directory sink.

        Args:
            directory: Target directory (created if missing)
            name: Sink name for logs and errors ("valid" / "invalid")
            diagnostic_suffix: Suffix of the companion record file
        """
        self.directory = Path(directory)
        self.name = name
        self.diagnostic_suffix = diagnostic_suffix
        self.directory.mkdir(parents=True, exist_ok=True)

    def document_path(self, document_id: str) -> Path:
        return self.directory / self._safe_name(document_id)

    def record_path(self, document_id: str) -> Path:
        return self.directory / f"{self._safe_name(document_id)}{self.diagnostic_suffix}"

    def write(self, document_id: str, content: bytes, record: DiagnosticRecord) -> None:
        document_path = self.document_path(document_id)
        self._atomic_write(document_path, content, document_id)
        try:
            self.write_record(document_id, record)
        except SinkWriteError:
            # A body without its record must not look routed
            self._remove(document_path, document_id)
            raise

    def write_record(self, document_id: str, record: DiagnosticRecord) -> None:
        self._atomic_write(
            self.record_path(document_id), record.to_json().encode("utf-8"), document_id
        )

    def discard(self, document_id: str) -> None:
        for path in (self.document_path(document_id), self.record_path(document_id)):
            self._remove(path, document_id)

    def read_record(self, document_id: str) -> Optional[DiagnosticRecord]:
        """Load a previously written companion record (None if absent)."""
        path = self.record_path(document_id)
        if not path.is_file():
            return None
        return DiagnosticRecord.model_validate_json(path.read_text(encoding="utf-8"))

    def _safe_name(self, document_id: str) -> str:
        if not document_id or Path(document_id).name != document_id or document_id in (".", ".."):
            raise SinkWriteError(
                f"refusing to write unsafe document name {document_id!r}",
                sink=self.name,
                document_id=document_id,
            )
        return document_id

    def _atomic_write(self, target: Path, data: bytes, document_id: str) -> None:
        tmp_name: Optional[str] = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=self.directory, prefix=f".{target.name}.", suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, target)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise SinkWriteError(
                f"cannot write {target.name} to {self.name} sink: {e.strerror or e}",
                sink=self.name,
                document_id=document_id,
            ) from e

        logger.debug("Wrote sink file", sink=self.name, path=str(target), size=len(data))

    def _remove(self, target: Path, document_id: str) -> None:
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            raise SinkWriteError(
                f"cannot remove {target.name} from {self.name} sink: {e.strerror or e}",
                sink=self.name,
                document_id=document_id,
            ) from e

    def __repr__(self) -> str:
        return f"DirectorySink(name={self.name!r}, directory={self.directory})"
