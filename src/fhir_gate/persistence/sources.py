"""
Document sources: the watched input location.

A source is an ordered, re-pollable container. Polling never consumes items:
the same item is re-observed on every poll until something else removes it,
which is why the dispatcher consults the processed set before routing.
"""

from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from fhir_gate.exceptions import SourceReadError
from fhir_gate.models.document import Document, DocumentRef

logger = structlog.get_logger(__name__)

# In-progress uploads / editor swap files that must not be picked up
PARTIAL_SUFFIXES = (".tmp", ".part", ".swp")


class BaseSource(ABC):
    """Ordered container of documents at a configured location."""

    @abstractmethod
    def poll(self) -> list[DocumentRef]:
        """
        List currently present items in discovery order.

        Raises:
            SourceReadError: If the location cannot be listed
        """

    @abstractmethod
    def read(self, ref: DocumentRef) -> Document:
        """
        Read an item's raw content.

        Raises:
            SourceReadError: If the item cannot be read
        """


class DirectorySource(BaseSource):
    """
    Directory of document files, polled by glob pattern.

    Items are ordered by file name. Hidden files and partial uploads are ignored.
    Files are never moved or deleted.
    """

    def __init__(self, directory: str | Path, pattern: str = "*.json"):
        self.directory = Path(directory)
        self.pattern = pattern
        self.directory.mkdir(parents=True, exist_ok=True)

    def poll(self) -> list[DocumentRef]:
        try:
            candidates = sorted(self.directory.glob(self.pattern), key=lambda p: p.name)
            refs = [
                DocumentRef(identifier=path.name, location=str(path.resolve()))
                for path in candidates
                if path.is_file() and self._is_eligible(path.name)
            ]
        except OSError as e:
            raise SourceReadError(
                f"cannot list input directory: {e}", location=str(self.directory)
            ) from e

        logger.debug("Polled input directory", directory=str(self.directory), found=len(refs))
        return refs

    def read(self, ref: DocumentRef) -> Document:
        try:
            content = Path(ref.location).read_bytes()
        except OSError as e:
            raise SourceReadError(
                f"cannot read document: {e.strerror or e}", location=ref.location
            ) from e
        return Document(identifier=ref.identifier, location=ref.location, content=content)

    @staticmethod
    def _is_eligible(name: str) -> bool:
        return not name.startswith(".") and not name.endswith(PARTIAL_SUFFIXES)

    def __repr__(self) -> str:
        return f"DirectorySource(directory={self.directory}, pattern={self.pattern!r})"
