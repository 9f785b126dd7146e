"""Shared test fixtures for the textfilter test suite."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the filter fixtures directory."""
    return Path(__file__).resolve().parent / "fixtures" / "filters"
