"""Tests for the recurring task store."""

from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from recurring_todo.models.recurring_task import RecurringTask
from recurring_todo.models.recurrence_exception import RecurrenceException
from recurring_todo.models.task import Task
from recurring_todo.services.errors import StorageError
from recurring_todo.services.recurrence_store import RecurrenceStore


@pytest.fixture
def store(engine):
    with Session(engine) as session:
        yield RecurrenceStore(session)


@pytest.fixture
def template(store):
    return store.save_template(
        RecurringTask(
            user_id="user-1",
            title="Backup",
            frequency="DAILY",
            start_date=datetime(2025, 1, 1),
        )
    )


def _task(template_id, recurring_date):
    return Task(
        user_id="user-1",
        title="Backup",
        due_date=recurring_date,
        recurring_template_id=template_id,
        recurring_date=recurring_date,
    )


def test_second_instance_for_same_occurrence_is_a_conflict(store, template):
    occurrence = datetime(2025, 1, 2)

    assert store.create_instance(_task(template.id, occurrence)) is True
    assert store.create_instance(_task(template.id, occurrence)) is False
    assert len(store.list_instances(template.id)) == 1


def test_tasks_without_template_never_conflict(store):
    assert store.create_instance(_task(None, None)) is True
    assert store.create_instance(_task(None, None)) is True


def test_instance_for_missing_template_is_a_storage_error(store):
    with pytest.raises(StorageError):
        store.create_instance(_task(999, datetime(2025, 1, 2)))


def test_instance_dates_are_windowed(store, template):
    for day in (1, 5, 10):
        store.create_instance(_task(template.id, datetime(2025, 1, day)))

    dates = store.load_instance_dates(template.id, datetime(2025, 1, 5), datetime(2025, 1, 10))

    assert dates == {datetime(2025, 1, 5), datetime(2025, 1, 10)}


def test_duplicate_exception_returns_none(store, template):
    first = store.create_exception(
        RecurrenceException(
            recurring_task_id=template.id, original_date=datetime(2025, 1, 3), action="skip"
        )
    )
    second = store.create_exception(
        RecurrenceException(
            recurring_task_id=template.id, original_date=datetime(2025, 1, 3), action="skip"
        )
    )

    assert first is not None and first.id is not None
    assert second is None


def test_watermark_on_missing_template(store):
    assert store.update_template_watermark(999, datetime(2025, 1, 1)) is False


def test_active_templates(store, template):
    paused = store.save_template(
        RecurringTask(
            user_id="user-1",
            title="Paused",
            frequency="DAILY",
            start_date=datetime(2025, 1, 1),
            is_active=False,
        )
    )

    active = store.load_active_templates("user-1")

    assert [t.id for t in active] == [template.id]
    assert paused.id not in [t.id for t in active]


def test_sqlalchemy_failures_become_storage_errors(store, monkeypatch):
    def unavailable(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(store.session, "get", unavailable)

    with pytest.raises(StorageError) as excinfo:
        store.load_template(1)
    assert excinfo.value.code == "STORAGE_ERROR"
    assert excinfo.value.details == {"operation": "load_template"}
