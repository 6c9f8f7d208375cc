"""
Integration tests for FHIR Gate.

Test components together or against real external services:
- Sample documents through the real directory pipeline (no services needed)
- Redis processed set (marked with @pytest.mark.integration, skipped without Redis)
"""
