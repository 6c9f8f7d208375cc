"""
Abstract base for validator backends.

A validator is the external conformance-checking capability consumed by the
validation stage. This abstraction allows swapping the local JSON-Schema
profiles for a remote FHIR $validate endpoint without touching the pipeline.
"""

from abc import ABC, abstractmethod
from typing import Any

import structlog

from fhir_gate.models.document import ParsedResource
from fhir_gate.models.outcome_models import Issue

logger = structlog.get_logger(__name__)


class BaseValidator(ABC):
    """
    Abstract base class for validator backends.

    Responsibilities:
    - Check a parsed resource against structural and terminology rules
    - Report every finding as an Issue, in a deterministic order

    Does NOT handle:
    - Parsing (that's ResourceParser's job)
    - Pass/fail decisions (that's classify()'s job)
    - Routing or retries (that's Router/Dispatcher's job)

    Findings are returned, never raised. An exception from validate() means the
    validator itself is broken and is reported as a ValidatorFault.
    """

    name: str = "base"

    @abstractmethod
    def validate(self, resource: ParsedResource) -> list[Issue]:
        """
        Validate a parsed resource.

        Args:
            resource: Parsed resource with its resourceType

        Returns:
            All findings (may be empty), in emission order

        Raises:
            ValidatorFault: The backend could not perform validation
        """

    def describe(self) -> dict[str, Any]:
        """Backend description for startup logs."""
        return {"validator": self.name}

    def close(self) -> None:
        """Release backend resources. Default implementation does nothing."""
        logger.debug("Closing validator", validator=self.name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
