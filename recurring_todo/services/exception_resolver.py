"""Apply skip / reschedule overrides to raw occurrences."""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List

from recurring_todo.models.recurrence_exception import ExceptionAction, RecurrenceException
from recurring_todo.utils.logger import get_logger

logger = get_logger("recurring_todo.resolver")


@dataclass(frozen=True)
class ResolvedOccurrence:
    """An occurrence ready to materialize.

    ``original_date`` is the dedup key; ``due_date`` is where the task lands.
    """

    original_date: datetime
    due_date: datetime

    @property
    def rescheduled(self) -> bool:
        return self.due_date != self.original_date


def resolve(
    raw_occurrences: Iterable[datetime], exceptions: Iterable[RecurrenceException]
) -> List[ResolvedOccurrence]:
    """
    Resolve raw occurrences against a template's exceptions.

    Skipped occurrences are dropped, rescheduled ones keep their original date
    and take the exception's new date as due date. Input order is preserved.
    Exceptions matching no occurrence are left unused.
    """
    overrides: Dict[datetime, RecurrenceException] = {
        exception.original_date: exception for exception in exceptions
    }

    resolved = []
    for occurrence in raw_occurrences:
        override = overrides.get(occurrence)
        if override is None:
            resolved.append(ResolvedOccurrence(occurrence, occurrence))
        elif override.action == ExceptionAction.SKIP.value:
            continue
        elif override.action == ExceptionAction.RESCHEDULE.value and override.new_date is not None:
            resolved.append(ResolvedOccurrence(occurrence, override.new_date))
        else:
            logger.warning(
                "Ignoring malformed recurrence exception",
                exception_id=override.id,
                recurring_task_id=override.recurring_task_id,
                action=override.action,
                original_date=occurrence,
            )
            resolved.append(ResolvedOccurrence(occurrence, occurrence))
    return resolved
