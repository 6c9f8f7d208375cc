"""
Local validator backed by JSON Schema profiles.

Validates each resource against the Draft 7 profile registered for its
resourceType and reports findings as FHIR-style issues:
- missing required element  -> ERROR "minimum required = 1, but only found 0"
- code outside bound value set -> ERROR "The value provided ('x') is not in the value set ..."
- any other schema violation -> ERROR with the jsonschema message
- no profile for the type   -> WARNING (lenient, the document can still pass)
- no narrative (dom-6)      -> WARNING (best-practice recommendation)
"""

import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Optional

import structlog
from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from jsonschema.exceptions import ValidationError as SchemaViolation

from fhir_gate.exceptions import ValidatorFault
from fhir_gate.models.document import ParsedResource
from fhir_gate.models.enums import Severity
from fhir_gate.models.outcome_models import Issue
from fhir_gate.validators.base import BaseValidator
from fhir_gate.validators.profiles import BUNDLED_PROFILES, NON_DOMAIN_RESOURCES

logger = structlog.get_logger(__name__)

SCHEMA_FILE_SUFFIX = ".schema.json"
MISSING_ELEMENT_MESSAGE = "minimum required = 1, but only found 0"
NARRATIVE_MESSAGE = (
    "Constraint failed: dom-6: 'A resource should have narrative for robust management' "
    "(defined in http://hl7.org/fhir/StructureDefinition/DomainResource) "
    "(Best Practice Recommendation)"
)


def fhir_path(resource_type: str, path: Iterable[Any]) -> str:
    """
    Render a jsonschema path as a FHIR-style location.

    ['name', 0, 'use'] -> 'Patient.name[0].use'
    """
    location = resource_type
    for part in path:
        if isinstance(part, int):
            location += f"[{part}]"
        else:
            location += f".{part}"
    return location


class SchemaValidator(BaseValidator):
    """
    Validate resources against per-resourceType JSON Schema profiles.

    Profiles are the bundled ones plus any <ResourceType>.schema.json found in
    schema_dir (loaded lazily, cached per type).
    """

    name = "schema"

    def __init__(
        self,
        schema_dir: Optional[str] = None,
        narrative_check: bool = True,
        profiles: Optional[dict[str, dict]] = None,
    ):
        """
        Initialize schema validator.

        Args:
            schema_dir: Optional directory of extra/overriding profiles
            narrative_check: Emit the dom-6 narrative warning
            profiles: Explicit profile map (replaces the bundled profiles)
        """
        self.schema_dir = Path(schema_dir) if schema_dir else None
        self.narrative_check = narrative_check
        self._profiles: dict[str, dict] = dict(BUNDLED_PROFILES if profiles is None else profiles)
        self._validators: dict[str, Draft7Validator] = {}

    def describe(self) -> dict[str, Any]:
        return {
            "validator": self.name,
            "schema_dir": str(self.schema_dir) if self.schema_dir else None,
            "bundled_profiles": sorted(self._profiles),
            "narrative_check": self.narrative_check,
        }

    def validate(self, resource: ParsedResource) -> list[Issue]:
        resource_type = resource.resource_type
        validator = self._get_validator(resource_type)

        issues: list[Issue] = []
        if validator is None:
            issues.append(
                Issue(
                    severity=Severity.WARNING,
                    location=resource_type,
                    message=f"No profile registered for resource type '{resource_type}'; "
                    "structural checks skipped",
                )
            )
        else:
            errors = sorted(
                validator.iter_errors(resource.data),
                key=lambda e: [str(p) for p in e.absolute_path],
            )
            issues.extend(self._to_issues(resource_type, errors))

        if self.narrative_check and self._lacks_narrative(resource):
            issues.append(
                Issue(severity=Severity.WARNING, location=resource_type, message=NARRATIVE_MESSAGE)
            )

        logger.debug(
            "Schema validation finished",
            resource_type=resource_type,
            issue_count=len(issues),
        )
        return issues

    def _to_issues(self, resource_type: str, errors: Sequence[SchemaViolation]) -> list[Issue]:
        issues: list[Issue] = []
        reported_missing: set[str] = set()

        for error in errors:
            if error.validator == "required":
                # jsonschema yields one error per missing property, all sharing
                # validator_value; report each missing element once.
                instance = error.instance if isinstance(error.instance, dict) else {}
                for prop in error.validator_value:
                    if prop in instance:
                        continue
                    location = fhir_path(resource_type, [*error.absolute_path, prop])
                    if location in reported_missing:
                        continue
                    reported_missing.add(location)
                    issues.append(
                        Issue(severity=Severity.ERROR, location=location, message=MISSING_ELEMENT_MESSAGE)
                    )
                continue

            location = fhir_path(resource_type, error.absolute_path)
            if error.validator == "enum":
                message = self._value_set_message(error)
            else:
                message = error.message
            issues.append(Issue(severity=Severity.ERROR, location=location, message=message))

        return issues

    @staticmethod
    def _value_set_message(error: SchemaViolation) -> str:
        binding = error.schema.get("x-valueSet") if isinstance(error.schema, dict) else None
        if binding:
            name, url = binding
            return (
                f"The value provided ({error.instance!r}) is not in the value set "
                f"'{name}' ({url}), and a code is required from this value set"
            )
        return f"The value provided ({error.instance!r}) is not one of {error.validator_value!r}"

    @staticmethod
    def _lacks_narrative(resource: ParsedResource) -> bool:
        if resource.resource_type in NON_DOMAIN_RESOURCES:
            return False
        text = resource.data.get("text")
        return not (isinstance(text, dict) and text.get("div"))

    def _get_validator(self, resource_type: str) -> Optional[Draft7Validator]:
        """
        Get cached validator for a resource type.

        Returns:
            Draft7Validator, or None when no profile exists for the type

        Raises:
            ValidatorFault: If a profile file cannot be loaded or is not a valid schema
        """
        if resource_type in self._validators:
            return self._validators[resource_type]

        schema = self._load_profile(resource_type)
        if schema is None:
            return None

        try:
            Draft7Validator.check_schema(schema)
        except SchemaError as e:
            raise ValidatorFault(
                f"Invalid profile for {resource_type}: {e.message}",
                validator=self.name,
                cause=type(e).__name__,
            ) from e

        self._validators[resource_type] = Draft7Validator(schema)
        return self._validators[resource_type]

    def _load_profile(self, resource_type: str) -> Optional[dict]:
        if self.schema_dir is not None:
            schema_file = self.schema_dir / f"{resource_type}{SCHEMA_FILE_SUFFIX}"
            if schema_file.is_file():
                try:
                    with open(schema_file, "r", encoding="utf-8") as f:
                        schema = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    raise ValidatorFault(
                        f"Failed to load profile {schema_file}: {e}",
                        validator=self.name,
                        cause=type(e).__name__,
                    ) from e
                logger.info("Loaded profile", resource_type=resource_type, path=str(schema_file))
                return schema

        return self._profiles.get(resource_type)
