"""
SmartAid Test Suite
===================

Test Structure:
- test_actions/: reminder engines, subscription registry, dedup tracker
- test_tools/: push notification dispatcher
- test_services/: persistence and the reminder service facade
- test_api/: FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run only the reminder engines
    pytest tests/test_actions/

    # Run only marked tests
    pytest -m "scheduler"
    pytest -m "api"
"""
