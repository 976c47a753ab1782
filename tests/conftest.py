"""
Pytest configuration for the duplicate counter tests.
"""

import pytest


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests"
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests by default unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def mixed_values():
    """Multiplicities {1: 1, 2: 2, 3: 3}."""
    return [1, 2, 2, 3, 3, 3]


@pytest.fixture
def pairs_values():
    """Every value occurs at most twice, negative values included."""
    return [4, -9, 17, 4, 0, -9, 23, 100, 0, -50]
