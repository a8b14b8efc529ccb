"""
Charity Prep Test Suite
=======================

Test organization:
- tests/unit/                            - Shared library tests
- tests/services/charity_compliance/     - Service, repository and route tests

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Shared library only
"""
