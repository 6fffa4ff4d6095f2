"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest

from clauselens.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any .env file."""
    return Settings(_env_file=None)  # type: ignore[call-arg]
