"""Pytest configuration and fixtures."""

import os
from datetime import UTC, datetime
from pathlib import Path

import pytest

FIXED_NOW = datetime(2024, 3, 5, 14, 30, 15, tzinfo=UTC)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    # Remove any CACHEWARE_ env vars that might interfere
    for key in list(os.environ.keys()):
        if key.startswith("CACHEWARE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fixed_clock():
    """A clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def mock_env_file(tmp_path: Path) -> Path:
    """Create a temporary .env file."""
    env_file = tmp_path / ".env"
    env_file.write_text(
        """
CACHEWARE_CACHE_MODE=public
CACHEWARE_CACHE_EXPIRE=30
CACHEWARE_LOG_LEVEL=DEBUG
"""
    )
    return env_file
