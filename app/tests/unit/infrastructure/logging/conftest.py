"""Fixtures for infrastructure.logging tests."""

import pytest

from infrastructure.logging.context import clear_request_context


@pytest.fixture(autouse=True)
def clean_logging_context():
    """Start and finish every test with an empty logging context."""
    clear_request_context()
    yield
    clear_request_context()
