"""
Test fixtures for FHIR Gate.

documents/ holds the sample input set:
- valid-patient.json: conformant Patient with narrative (no issues)
- valid-observation.json: conformant Observation without narrative (dom-6 warning only)
- invalid-patient-missing-type.json: no resourceType (parse failure)
- invalid-patient-wrong-gender.json: gender outside AdministrativeGender
- invalid-observation-missing-status.json: required Observation.status missing
- malformed-json.json: syntactically broken JSON (parse failure)
"""
