"""Conftest for unit tests - every test here runs without Redis."""

import pytest


def pytest_collection_modifyitems(config, items):
    """Mark all tests in the unit directory as unit tests."""
    for item in items:
        if "unit" in str(item.path):
            item.add_marker(pytest.mark.unit)
