"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from skein.conf import settings

if TYPE_CHECKING:
    from collections.abc import Generator

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture(autouse=True)
def configure_test_settings() -> Generator[None]:
    """Configure settings for each test.

    This fixture runs automatically before each test to configure settings
    and resets them after the test completes.

    Yields:
        None
    """
    settings.configure(
        DIALOGUE_START_NODE="Start",
        DIALOGUE_EXTRACT_CHARACTER=True,
        DIALOGUE_VALIDATE_REFERENCES=True,
        DIALOGUE_MAX_SILENT_STEPS=10000,
        LOG_LEVEL="INFO",
    )
    yield
    # Reset settings after test
    settings._wrapped = None


@pytest.fixture
def kitchen_sink_path() -> Path:
    """Path to the sample compiled script used by the end-to-end tests."""
    return DATA_DIR / "kitchen_sink.json"
