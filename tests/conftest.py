from datetime import date, datetime, timezone

import pytest

from config import AppConfig
from models import Task
from store.backends import MemoryStorage
from workforce import WorkforceManager

FIXED_NOW = datetime(2025, 1, 1, 9, 30, tzinfo=timezone.utc)


def build_task(task_id, priority="medium", deadline="2025-01-10", **overrides):
    """Build a Task directly, for query tests that need no store."""
    fields = dict(
        id=task_id,
        description=f"Task {task_id}",
        priority=priority,
        time_estimate=1.0,
        deadline=date.fromisoformat(deadline),
        created_at=FIXED_NOW,
    )
    fields.update(overrides)
    return Task(**fields)


@pytest.fixture
def make_task():
    return build_task


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def config():
    return AppConfig()


@pytest.fixture
def manager(config, storage, clock):
    """Manager over an empty in-memory store (no defaults seeded)."""
    return WorkforceManager(config, backend=storage, clock=clock)


@pytest.fixture
def ana(manager):
    return manager.add_worker("Ana")
