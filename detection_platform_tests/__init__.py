"""
detection_platform_tests package

Tests for the detection platform API service:

- HTTP sign-up / sign-in / session flows (`test_auth.py`)
- Request validation (`test_validation.py`)
- Delegation to the credential authority (`test_services.py`)
- Schema constraints, cascades and DTOs (`test_models.py`, `test_db_init.py`)
"""
