"""Shared fixtures for depwalk tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo setup_logging() so no test writes to another test's captured stream."""
    yield
    structlog.reset_defaults()
