"""
Bundled structural profiles (JSON Schema, Draft 7) for common FHIR resources.

Pragmatic subsets of the R4B base resources: enough structure and terminology
binding to gate the usual Patient and Observation feeds. Additional or stricter
profiles are loaded from SCHEMA_DIR and take precedence.

Non-standard keyword:
- x-valueSet: (name, canonical url) of the required binding, used for enum messages
"""

FHIR_ID_PATTERN = r"^[A-Za-z0-9\-\.]{1,64}$"
FHIR_DATE_PATTERN = r"^\d{4}(-(0[1-9]|1[0-2])(-(0[1-9]|[12]\d|3[01]))?)?$"
FHIR_DATETIME_PATTERN = (
    r"^\d{4}(-(0[1-9]|1[0-2])(-(0[1-9]|[12]\d|3[01])"
    r"(T([01]\d|2[0-3]):[0-5]\d:([0-5]\d|60)(\.\d{1,9})?(Z|[+-]((0\d|1[0-3]):[0-5]\d|14:00)))?)?)?$"
)

NARRATIVE = {
    "type": "object",
    "required": ["status", "div"],
    "properties": {
        "status": {
            "type": "string",
            "enum": ["generated", "extensions", "additional", "empty"],
            "x-valueSet": ["NarrativeStatus", "http://hl7.org/fhir/ValueSet/narrative-status|4.3.0"],
        },
        "div": {"type": "string", "minLength": 1},
    },
}

CODING = {
    "type": "object",
    "properties": {
        "system": {"type": "string"},
        "version": {"type": "string"},
        "code": {"type": "string", "pattern": r"^[^\s]+( [^\s]+)*$"},
        "display": {"type": "string"},
    },
}

CODEABLE_CONCEPT = {
    "type": "object",
    "properties": {
        "coding": {"type": "array", "items": CODING},
        "text": {"type": "string"},
    },
}

IDENTIFIER = {
    "type": "object",
    "properties": {
        "use": {
            "type": "string",
            "enum": ["usual", "official", "temp", "secondary", "old"],
            "x-valueSet": ["IdentifierUse", "http://hl7.org/fhir/ValueSet/identifier-use|4.3.0"],
        },
        "system": {"type": "string"},
        "value": {"type": "string"},
    },
}

HUMAN_NAME = {
    "type": "object",
    "properties": {
        "use": {
            "type": "string",
            "enum": ["usual", "official", "temp", "nickname", "anonymous", "old", "maiden"],
            "x-valueSet": ["NameUse", "http://hl7.org/fhir/ValueSet/name-use|4.3.0"],
        },
        "text": {"type": "string"},
        "family": {"type": "string"},
        "given": {"type": "array", "items": {"type": "string"}},
        "prefix": {"type": "array", "items": {"type": "string"}},
        "suffix": {"type": "array", "items": {"type": "string"}},
    },
}

ADDRESS = {
    "type": "object",
    "properties": {
        "use": {
            "type": "string",
            "enum": ["home", "work", "temp", "old", "billing"],
            "x-valueSet": ["AddressUse", "http://hl7.org/fhir/ValueSet/address-use|4.3.0"],
        },
        "line": {"type": "array", "items": {"type": "string"}},
        "city": {"type": "string"},
        "district": {"type": "string"},
        "state": {"type": "string"},
        "postalCode": {"type": "string"},
        "country": {"type": "string"},
    },
}

REFERENCE = {
    "type": "object",
    "properties": {
        "reference": {"type": "string"},
        "display": {"type": "string"},
    },
}

QUANTITY = {
    "type": "object",
    "properties": {
        "value": {"type": "number"},
        "comparator": {"type": "string", "enum": ["<", "<=", ">=", ">"]},
        "unit": {"type": "string"},
        "system": {"type": "string"},
        "code": {"type": "string"},
    },
}

PATIENT = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Patient",
    "type": "object",
    "required": ["resourceType"],
    "properties": {
        "resourceType": {"const": "Patient"},
        "id": {"type": "string", "pattern": FHIR_ID_PATTERN},
        "text": NARRATIVE,
        "identifier": {"type": "array", "items": IDENTIFIER},
        "active": {"type": "boolean"},
        "name": {"type": "array", "items": HUMAN_NAME},
        "gender": {
            "type": "string",
            "enum": ["male", "female", "other", "unknown"],
            "x-valueSet": [
                "AdministrativeGender",
                "http://hl7.org/fhir/ValueSet/administrative-gender|4.3.0",
            ],
        },
        "birthDate": {"type": "string", "pattern": FHIR_DATE_PATTERN},
        "deceasedBoolean": {"type": "boolean"},
        "deceasedDateTime": {"type": "string", "pattern": FHIR_DATETIME_PATTERN},
        "address": {"type": "array", "items": ADDRESS},
        "managingOrganization": REFERENCE,
    },
}

OBSERVATION = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Observation",
    "type": "object",
    "required": ["resourceType", "status", "code"],
    "properties": {
        "resourceType": {"const": "Observation"},
        "id": {"type": "string", "pattern": FHIR_ID_PATTERN},
        "text": NARRATIVE,
        "identifier": {"type": "array", "items": IDENTIFIER},
        "status": {
            "type": "string",
            "enum": [
                "registered",
                "preliminary",
                "final",
                "amended",
                "corrected",
                "cancelled",
                "entered-in-error",
                "unknown",
            ],
            "x-valueSet": [
                "ObservationStatus",
                "http://hl7.org/fhir/ValueSet/observation-status|4.3.0",
            ],
        },
        "category": {"type": "array", "items": CODEABLE_CONCEPT},
        "code": CODEABLE_CONCEPT,
        "subject": REFERENCE,
        "effectiveDateTime": {"type": "string", "pattern": FHIR_DATETIME_PATTERN},
        "issued": {"type": "string", "pattern": FHIR_DATETIME_PATTERN},
        "valueQuantity": QUANTITY,
        "valueString": {"type": "string"},
        "valueBoolean": {"type": "boolean"},
        "valueCodeableConcept": CODEABLE_CONCEPT,
        "interpretation": {"type": "array", "items": CODEABLE_CONCEPT},
    },
}

BUNDLED_PROFILES: dict[str, dict] = {
    "Patient": PATIENT,
    "Observation": OBSERVATION,
}

# Resources that are not DomainResources and so carry no narrative
NON_DOMAIN_RESOURCES = frozenset({"Bundle", "Binary", "Parameters"})
