"""Per-occurrence override model for SQLModel."""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlmodel import Field, SQLModel

from recurring_todo.utils.dates import utcnow


class ExceptionAction(str, Enum):
    SKIP = "skip"
    RESCHEDULE = "reschedule"


class RecurrenceException(SQLModel, table=True):
    """Skip or move a single occurrence of a recurring task."""

    __table_args__ = (
        UniqueConstraint("recurring_task_id", "original_date", name="uq_exception_original_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    recurring_task_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("recurringtask.id", ondelete="CASCADE"),
            index=True,
            nullable=False,
        )
    )
    original_date: datetime = Field(sa_type=DateTime, index=True)  # occurrence instant being overridden
    action: str = Field(max_length=20)  # skip, reschedule
    new_date: Optional[datetime] = Field(default=None, sa_type=DateTime)  # required for reschedule
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
