# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

import os
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Actor modules set up the broker at import time
os.environ.setdefault("DRAMATIQ_TEST_MODE", "true")

from src.core.prompts import PromptCatalog, load_prompt_catalog  # noqa: E402

PROMPTS_DIR = Path(__file__).resolve().parents[1] / "config" / "prompts"


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def session_id() -> str:
    """Provide a sample session ID for testing."""
    return "session-550e8400"


@pytest.fixture(scope="session")
def prompt_catalog() -> PromptCatalog:
    """Prompt catalog loaded from config/prompts."""
    return load_prompt_catalog(PROMPTS_DIR)


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    return db
