"""Tests for applying recurrence exceptions."""

import logging
from datetime import datetime

from recurring_todo.models.recurrence_exception import RecurrenceException
from recurring_todo.services.exception_resolver import ResolvedOccurrence, resolve

RAW = [datetime(2025, 1, 6), datetime(2025, 1, 13), datetime(2025, 1, 20), datetime(2025, 1, 27)]


def _exception(original, action, new_date=None):
    return RecurrenceException(
        recurring_task_id=1, original_date=original, action=action, new_date=new_date
    )


def test_no_exceptions_keeps_every_occurrence():
    resolved = resolve(RAW, [])
    assert resolved == [ResolvedOccurrence(d, d) for d in RAW]
    assert not any(r.rescheduled for r in resolved)


def test_skip_drops_the_occurrence():
    resolved = resolve(RAW, [_exception(datetime(2025, 1, 20), "skip")])
    assert [r.original_date for r in resolved] == [
        datetime(2025, 1, 6),
        datetime(2025, 1, 13),
        datetime(2025, 1, 27),
    ]


def test_reschedule_keeps_original_date_as_key():
    resolved = resolve(
        RAW, [_exception(datetime(2025, 1, 13), "reschedule", datetime(2025, 1, 15))]
    )
    moved = resolved[1]
    assert moved.original_date == datetime(2025, 1, 13)
    assert moved.due_date == datetime(2025, 1, 15)
    assert moved.rescheduled


def test_order_follows_original_dates_even_when_moved_later():
    resolved = resolve(
        RAW, [_exception(datetime(2025, 1, 6), "reschedule", datetime(2025, 2, 1))]
    )
    assert [r.original_date for r in resolved] == RAW


def test_unmatched_exceptions_are_ignored():
    resolved = resolve(RAW, [_exception(datetime(2025, 3, 3), "skip")])
    assert len(resolved) == len(RAW)


def test_reschedule_without_new_date_keeps_occurrence_and_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="recurring_todo"):
        resolved = resolve(RAW, [_exception(datetime(2025, 1, 13), "reschedule")])

    assert resolved[1] == ResolvedOccurrence(datetime(2025, 1, 13), datetime(2025, 1, 13))
    assert "Ignoring malformed recurrence exception" in caplog.text
