"""Task model for SQLModel."""
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlmodel import Field, SQLModel

from recurring_todo.utils.dates import utcnow


class Task(SQLModel, table=True):
    """Task entity; generated tasks point back at their recurring template."""

    # One task per occurrence of a template; NULL template ids never collide
    __table_args__ = (
        UniqueConstraint("recurring_template_id", "recurring_date", name="uq_task_recurring_occurrence"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True, max_length=100)
    title: str = Field(max_length=200, min_length=1)
    description: Optional[str] = Field(default=None, max_length=1000)
    completed: bool = Field(default=False)
    priority: str = Field(default="medium", max_length=20)  # high, medium, low
    due_date: Optional[datetime] = Field(default=None, sa_type=DateTime, index=True)

    recurring_template_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("recurringtask.id", ondelete="CASCADE"),
            index=True,
            nullable=True,
        ),
    )
    recurring_date: Optional[datetime] = Field(default=None, sa_type=DateTime)  # original occurrence, never the due date

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
