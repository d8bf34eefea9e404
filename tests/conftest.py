"""
Pytest configuration and fixtures.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path
import pytest
import pytest_asyncio

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from worktimer.domain.timer import TimerEngine
from worktimer.infra.config import Settings
from worktimer.infra.db import init_db
from worktimer.infra.repository import SnapshotRepository
from worktimer.services import WorkTimer


class ManualClock:
    """Wall clock that only moves when a test advances it"""

    def __init__(self, start: datetime = datetime(2026, 1, 5, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def engine(clock):
    return TimerEngine(clock)


@pytest.fixture
def settings(tmp_path):
    """Settings pointing every path into the test's temporary directory"""
    return Settings(
        config_dir=tmp_path / "config",
        data_dir=tmp_path / "data",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
    )


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """File-backed SQLite database for a single test"""
    engine = await init_db(f"sqlite+aiosqlite:///{tmp_path / 'snapshots.db'}")
    yield engine
    await engine.dispose()


@pytest.fixture
def repo(db_engine):
    return SnapshotRepository(db_engine)


@pytest_asyncio.fixture
async def work_timer(settings, clock):
    timer = await WorkTimer.open(settings, clock=clock)
    yield timer
    await timer.close()
