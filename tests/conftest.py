"""
Shared pytest fixtures and configuration for handler-commons tests.

This module provides:
- A small resource schema built from the shared test document
- A MagicMock log sink wired into a RequestLogger
- Structlog context cleanup between tests
"""

import sys
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest

# Ensure handler_commons package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from handler_commons.core.logging import RequestLogger, clear_context
from handler_commons.core.printer import FilteredJsonPrinter
from handler_commons.core.schema import ResourceTypeSchema
from tests._support.handler_models import TEST_SCHEMA_DOCUMENT


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if "unit" not in markers:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_log_context() -> Generator[None, None, None]:
    clear_context()
    yield
    clear_context()


@pytest.fixture
def test_schema() -> ResourceTypeSchema:
    return ResourceTypeSchema.from_dict(TEST_SCHEMA_DOCUMENT)


@pytest.fixture
def log_sink() -> MagicMock:
    return MagicMock()


@pytest.fixture
def request_logger(log_sink: MagicMock) -> RequestLogger:
    return RequestLogger(log_sink, FilteredJsonPrinter())
