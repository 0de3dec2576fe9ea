"""Pytest configuration and fixtures."""

import os
from datetime import datetime

import pytest

# Keep the module-level engine away from the working directory
os.environ.setdefault("DATABASE_URL", "sqlite:///./.pytest_recurring_tasks.db")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from recurring_todo.db.config import build_engine  # noqa: E402
from recurring_todo.db.init import init_db  # noqa: E402
from recurring_todo.models.recurring_task import RecurringTask  # noqa: E402
from recurring_todo.services.recurring_task_service import RecurringTaskService  # noqa: E402
from recurring_todo.utils.metrics import metrics_collector  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    """A fresh SQLite database per test."""
    engine = build_engine(f"sqlite:///{tmp_path / 'recurring.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def service(engine):
    return RecurringTaskService(engine, max_workers=1)


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics_collector.reset()
    yield


@pytest.fixture
def make_template():
    """Build an unsaved template for pure rule evaluation."""

    def _make(**overrides):
        fields = {
            "user_id": "user-1",
            "title": "Water plants",
            "frequency": "DAILY",
            "interval": 1,
            "start_date": datetime(2025, 1, 6, 9, 0),
            "end_type": "NEVER",
        }
        fields.update(overrides)
        return RecurringTask(**fields)

    return _make
