"""
Pytest fixtures shared by the Kong configuration generator tests.
"""

import pytest
import structlog

from shared.logging import clear_context
from shared.test_helpers import SampleDataFactory, write_project


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop any logging configuration and run context left by a test."""
    yield
    structlog.reset_defaults()
    clear_context()


@pytest.fixture
def offers_service():
    return SampleDataFactory.offers_service()


@pytest.fixture
def project_root(tmp_path, offers_service):
    """Project on disk with the offers service and no auth template."""
    return write_project(tmp_path, [offers_service])
