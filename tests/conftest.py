"""Pytest configuration.

The repository uses a flat `src/` layout. This conftest ensures tests can import from the `src.*`
namespace when running `pytest` without installing the package, and provides a fixed request
instant so every test is deterministic.
"""

from __future__ import annotations

import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

# Ensure `import src...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from src.scheduling.timezones import TimezoneLookupTable, load_timezone_table  # noqa: E402

# Wednesday, 14 October 2026, noon UTC.
FIXED_NOW = datetime(2026, 10, 14, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture(scope="session")
def table() -> TimezoneLookupTable:
    return load_timezone_table()
