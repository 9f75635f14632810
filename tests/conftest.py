"""
Pytest configuration: make sure `import tsfclub` and `import api` work
regardless of where pytest is invoked.

It prepends the project root (one directory above *tests/*) to
``sys.path`` and points the settings at cheap bcrypt rounds and an
in‑memory database **before** any tsfclub module is imported.
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("TSF_BCRYPT_ROUNDS", "4")
os.environ.setdefault("TSF_DB_URL", "sqlite://")

from tsfclub.lifecycle import LifecycleEngine  # noqa: E402
from tsfclub.store import EntityStore  # noqa: E402

NOW = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """The frozen "now" used by the `engine` fixture."""
    return NOW


@pytest.fixture
def store():
    """A fresh store seeded from the bundled fixtures."""
    return EntityStore.from_fixtures()


@pytest.fixture
def engine(store):
    """Lifecycle engine with a frozen clock."""
    return LifecycleEngine(store, clock=lambda: NOW)
