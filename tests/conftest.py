"""Pytest configuration and shared fixtures for the nel test suite."""

import sys
from pathlib import Path

import pytest

# Make `nel` and `tests.fixtures` importable without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from tests.fixtures.workers import StubWorkerFactory


@pytest.fixture
def worker_factory() -> StubWorkerFactory:
    """Factory that hands out recording stub workers."""
    return StubWorkerFactory()


# Test markers
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Tests against a real worker process")
    config.addinivalue_line("markers", "slow: Tests that take >1s")


# Timeout configuration
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add timeout based on markers."""
    for item in items:
        if item.get_closest_marker("slow"):
            item.add_marker(pytest.mark.timeout(30))
        elif item.get_closest_marker("unit"):
            item.add_marker(pytest.mark.timeout(5))
        else:
            item.add_marker(pytest.mark.timeout(10))
