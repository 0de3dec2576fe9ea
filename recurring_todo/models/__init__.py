"""SQLModel tables for recurring tasks."""
from recurring_todo.models.recurring_task import EndType, Frequency, Priority, RecurringTask
from recurring_todo.models.recurrence_exception import ExceptionAction, RecurrenceException
from recurring_todo.models.task import Task

__all__ = [
    "EndType",
    "ExceptionAction",
    "Frequency",
    "Priority",
    "RecurrenceException",
    "RecurringTask",
    "Task",
]
