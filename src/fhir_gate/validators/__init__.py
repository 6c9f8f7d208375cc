"""
Validator backends (the external conformance-checking capability).

- base.py: BaseValidator interface
- schema_validator.py: local JSON Schema profiles (default)
- remote_validator.py: FHIR server $validate over HTTP
- profiles.py: bundled Patient/Observation profiles
"""

from fhir_gate.config import Settings
from fhir_gate.validators.base import BaseValidator
from fhir_gate.validators.remote_validator import RemoteValidator
from fhir_gate.validators.schema_validator import SchemaValidator


def build_validator(settings: Settings) -> BaseValidator:
    """Create the validator backend selected by VALIDATOR_BACKEND."""
    if settings.VALIDATOR_BACKEND == "remote":
        return RemoteValidator(settings.REMOTE_VALIDATOR_URL, timeout=settings.VALIDATOR_TIMEOUT)
    return SchemaValidator(
        schema_dir=settings.SCHEMA_DIR,
        narrative_check=settings.NARRATIVE_CHECK_ENABLED,
    )


__all__ = [
    "BaseValidator",
    "SchemaValidator",
    "RemoteValidator",
    "build_validator",
]
