"""
Warranty Registry Test Suite
============================

Test organization:
- tests/unit/               - Shared library tests (config, auth, logging)
- tests/services/warranty/  - Domain and API tests against the in-memory store

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=services           # With coverage
"""
