"""
Recurrence rule evaluation.

Turns a template's rule into the occurrence instants that fall inside a
window. Evaluation is pure: no storage access, no clock.

Every occurrence carries its ordinal (0-based position counted from
``start_date``). Ordinals are computed in closed form from the period index,
so AFTER_COUNT rules are enforced without walking the rule's history.
"""
from datetime import datetime, timedelta
from typing import Iterator, List, Tuple

from recurring_todo.models.recurring_task import EndType, Frequency, RecurringTask
from recurring_todo.utils.dates import add_months, months_between, weekday_numbers

Occurrence = Tuple[int, datetime]


def _iter_fixed_step(start: datetime, step: timedelta, lower: datetime) -> Iterator[Occurrence]:
    """One occurrence every ``step``; the ordinal equals the period index."""
    period = max(0, (lower - start) // step)
    while True:
        yield period, start + period * step
        period += 1


def _iter_weekdays(
    start: datetime, interval: int, weekdays: List[int], lower: datetime
) -> Iterator[Occurrence]:
    """Listed weekdays of every ``interval``-th week, weeks starting on Monday."""
    week_anchor = start - timedelta(days=start.weekday())
    step = timedelta(weeks=interval)
    per_week = len(weekdays)
    # Weekdays before start_date in the first week are not occurrences
    leading_skipped = sum(1 for day in weekdays if day < start.weekday())
    first_week = per_week - leading_skipped

    period = max(0, (lower - week_anchor) // step)
    while True:
        week_start = week_anchor + period * step
        for position, day in enumerate(weekdays):
            if period == 0:
                if position < leading_skipped:
                    continue
                ordinal = position - leading_skipped
            else:
                ordinal = first_week + (period - 1) * per_week + position
            yield ordinal, week_start + timedelta(days=day)
        period += 1


def _iter_months(start: datetime, step_months: int, day: int, lower: datetime) -> Iterator[Occurrence]:
    """One occurrence every ``step_months`` months on ``day``, clamped to month end."""
    # With an explicit day the first month may fall before start_date and not count
    first_missing = 1 if add_months(start, 0, day) < start else 0

    period = max(0, months_between(start, lower) // step_months)
    while True:
        if period > 0 or not first_missing:
            yield period - first_missing, add_months(start, period * step_months, day)
        period += 1


def _iter_rule(template: RecurringTask, lower: datetime) -> Iterator[Occurrence]:
    """Yield (ordinal, instant) in chronological order, from the period containing ``lower``."""
    start = template.start_date
    interval = template.interval or 1
    frequency = Frequency(template.frequency)

    if frequency == Frequency.DAILY:
        return _iter_fixed_step(start, timedelta(days=interval), lower)
    if frequency == Frequency.WEEKLY:
        if template.by_week_day:
            return _iter_weekdays(start, interval, weekday_numbers(template.by_week_day), lower)
        return _iter_fixed_step(start, timedelta(weeks=interval), lower)
    if frequency == Frequency.MONTHLY:
        return _iter_months(start, interval, template.by_month_day or start.day, lower)
    return _iter_months(start, interval * 12, start.day, lower)


def occurrences(template: RecurringTask, window_start: datetime, window_end: datetime) -> List[datetime]:
    """
    Compute the occurrences of a template inside ``[window_start, window_end]``.

    Args:
        template: A validated recurring task template
        window_start: Inclusive lower bound (naive UTC)
        window_end: Inclusive upper bound (naive UTC)

    Returns:
        Chronologically ordered occurrence instants, never before start_date,
        never past end_date (ON_DATE) or the count-th occurrence (AFTER_COUNT)
    """
    lower = max(window_start, template.start_date)
    upper = window_end
    end_type = EndType(template.end_type)
    if end_type == EndType.ON_DATE and template.end_date is not None:
        upper = min(upper, template.end_date)
    limit = template.count if end_type == EndType.AFTER_COUNT else None

    if lower > upper:
        return []

    result = []
    for ordinal, instant in _iter_rule(template, lower):
        if instant > upper:
            break
        if limit is not None and ordinal >= limit:
            break
        if instant >= lower:
            result.append(instant)
    return result
