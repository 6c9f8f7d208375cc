"""
Unit tests for FHIR Gate.

Test individual components in isolation:
- Data models (records, enums, invariants)
- Parser and classifier (pass/fail rule)
- Validators (schema profiles, remote $validate via MockTransport)
- Source, sinks and processed set
- Router, error handler, dispatcher and reporter
"""
