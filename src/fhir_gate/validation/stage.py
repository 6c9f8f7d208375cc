"""
Validation stage: parse -> validate -> classify.

process() is the raising form (ParseError / ValidatorFault).
evaluate() is the explicit-result form used by the error handler: it returns
either an Outcome or a Fault and never raises for document-level failures.
"""

from fhir_gate.exceptions import ParseError, ValidatorFault
from fhir_gate.models.document import Document
from fhir_gate.models.enums import FaultKind
from fhir_gate.models.outcome_models import Fault, Issue, Outcome
from fhir_gate.validation.classifier import classify
from fhir_gate.validation.parser import ResourceParser
from fhir_gate.validators.base import BaseValidator


class ValidationStage:
    """
    Produce the classified Outcome for one document.

    Side-effect free: the document is never mutated and nothing is logged here;
    results flow back to the dispatcher's reporter.
    """

    def __init__(self, validator: BaseValidator, parser: ResourceParser | None = None):
        """
        Initialize validation stage.

        Args:
            validator: Validator backend (external capability)
            parser: Resource parser (default ResourceParser)
        """
        self.validator = validator
        self.parser = parser or ResourceParser()

    def process(self, document: Document) -> Outcome:
        """
        Parse, validate and classify a document.

        Args:
            document: Document as read from the source

        Returns:
            Outcome (passed iff no FATAL/ERROR issue)

        Raises:
            ParseError: If content is not a JSON object with a resourceType
            ValidatorFault: If the validator failed to execute
        """
        resource = self.parser.parse(document.content)
        issues = self._run_validator(resource)
        return classify(issues, resource_type=resource.resource_type)

    def evaluate(self, document: Document) -> Outcome | Fault:
        """
        Explicit-result variant of process().

        Returns:
            Outcome on success, Fault (PARSE_ERROR / VALIDATOR_FAULT) otherwise
        """
        try:
            return self.process(document)
        except ParseError as e:
            return Fault(kind=FaultKind.PARSE_ERROR, message=e.message, details=e.details)
        except ValidatorFault as e:
            return Fault(
                kind=FaultKind.VALIDATOR_FAULT,
                message=f"validator fault: {e.message}",
                details=e.details,
            )

    def _run_validator(self, resource) -> list[Issue]:
        try:
            issues = self.validator.validate(resource)
        except ValidatorFault:
            raise
        except Exception as e:
            raise ValidatorFault(
                f"validator failed: {type(e).__name__}: {e}",
                validator=self.validator.name,
                cause=type(e).__name__,
            ) from e

        if not isinstance(issues, list) or not all(isinstance(i, Issue) for i in issues):
            raise ValidatorFault(
                f"validator returned {type(issues).__name__}, expected list of Issue",
                validator=self.validator.name,
            )
        return issues
