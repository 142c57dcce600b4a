"""
Shared pytest fixtures and configuration for notifyval tests.
"""

import pytest

from notifyval import RecordingListener, Registry
from notifyval.registry import _reset_default_registry


@pytest.fixture(autouse=True)
def reset_default_registry():
    """Reset the default registry before each test to prevent state leakage."""
    _reset_default_registry()
    yield
    _reset_default_registry()


@pytest.fixture
def listener():
    """Provide a listener that records every notification."""
    return RecordingListener()


@pytest.fixture
def registry(listener):
    """Provide a fresh Registry reporting to the recording listener."""
    return Registry(listener=listener)
