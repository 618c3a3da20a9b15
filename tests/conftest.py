"""
Pytest fixtures for the must test suite.

Every test starts with an empty default failure registry and an
unconfigured ``must`` logger hierarchy, and both are restored afterwards.
"""

import pytest

from must.logging_config import LogContext, reset_logging
from must.registry import FailureRegistry
from must.testing import RecordingHandler, isolated_registry


@pytest.fixture(autouse=True)
def _isolated_default_registry():
    """Swap the process-wide handler list for an empty one."""
    with isolated_registry() as registry:
        yield registry


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def registry(_isolated_default_registry) -> FailureRegistry:
    """The (isolated) default registry the check functions report to."""
    return _isolated_default_registry


@pytest.fixture
def recorder(registry) -> RecordingHandler:
    """A RecordingHandler already registered with the default registry."""
    handler = RecordingHandler()
    registry.register(handler)
    return handler
