"""
Root test configuration.

Layout:
- unit/models       pydantic entities and form validation
- unit/compliance   rule modules (progress, query, tracking, sessions, dashboard)
- integration/      JSON backend, service and CLI against a temp data dir

    pytest tests/unit -v
    pytest tests -v
"""

import sys
from pathlib import Path

# Project root holds the top-level packages
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from datetime import datetime


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Fast isolated tests")
    config.addinivalue_line("markers", "integration: Real files in a temp data dir")


def pytest_collection_modifyitems(config, items):
    """Mark tests by directory so `-m unit` / `-m integration` work."""
    for item in items:
        parts = Path(str(item.fspath)).parts
        if "integration" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit" in parts:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def fixed_time():
    """A Monday noon, so day arithmetic never crosses a boundary by accident."""
    return datetime(2024, 1, 15, 12, 0, 0)
