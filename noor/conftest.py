# noor/conftest.py
import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# Add repo root to PYTHONPATH
REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from noor.core.clock import FixedClock
from noor.features.storage.json_store import JsonFileStore
from noor.features.storage.provider import InMemoryStore
from noor.features.storage.sql_store import SqlKeyValueStore
from noor.features.streaks.service import StreakTracker

LOCAL_TZ = ZoneInfo("America/New_York")


@pytest.fixture
def clock():
    """Fixed clock at 2024-01-10 09:00 New York time."""
    return FixedClock(datetime(2024, 1, 10, 9, 0, tzinfo=LOCAL_TZ))


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def json_store(tmp_path):
    return JsonFileStore(tmp_path / "state.json")


@pytest.fixture
def sql_store(tmp_path):
    store = SqlKeyValueStore(f"sqlite:///{tmp_path / 'state.db'}")
    yield store
    store.close()


@pytest.fixture
def tracker(store, clock):
    return StreakTracker(store, clock)
