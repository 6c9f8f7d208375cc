"""
Error handler: total coverage for one processing attempt.

Wraps read -> validate -> route so that every discovered item ends in exactly
one sink. Only SinkWriteError escapes: nothing was recorded, and the dispatcher
releases the claim so the next poll retries.
"""

from fhir_gate.exceptions import SinkWriteError, SourceReadError
from fhir_gate.models.document import DocumentRef
from fhir_gate.models.enums import FaultKind
from fhir_gate.models.outcome_models import Fault, RoutingResult
from fhir_gate.persistence.sources import BaseSource
from fhir_gate.routing.router import Router
from fhir_gate.validation.stage import ValidationStage


class ErrorHandler:
    """Run the guarded sequence for one item and always produce a RoutingResult."""

    def __init__(self, source: BaseSource, stage: ValidationStage, router: Router):
        self.source = source
        self.stage = stage
        self.router = router

    def handle(self, ref: DocumentRef) -> RoutingResult:
        """
        Process one discovered item to a terminal routing.

        Returns:
            RoutingResult (VALID or INVALID)

        Raises:
            SinkWriteError: If the chosen sink could not be written
        """
        try:
            document = self.source.read(ref)
        except SourceReadError as e:
            fault = Fault(kind=FaultKind.READ_ERROR, message=e.message, details=e.details)
            return self.router.route_fault(ref.identifier, None, fault)

        try:
            result = self.stage.evaluate(document)
        except Exception as e:
            result = self._unexpected(e)

        if isinstance(result, Fault):
            return self.router.route_fault(document.identifier, document.content, result)

        try:
            if result.resource_type:
                document = document.with_resource_type(result.resource_type)
            return self.router.route(document, result)
        except SinkWriteError:
            raise
        except Exception as e:
            return self.router.route_fault(document.identifier, document.content, self._unexpected(e))

    @staticmethod
    def _unexpected(error: Exception) -> Fault:
        return Fault(
            kind=FaultKind.UNEXPECTED_ERROR,
            message=f"unexpected error: {type(error).__name__}: {error}",
            details={"error_type": type(error).__name__},
        )
