"""Recurring task template model for SQLModel."""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

from recurring_todo.utils.dates import utcnow


class Frequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class EndType(str, Enum):
    NEVER = "NEVER"
    ON_DATE = "ON_DATE"
    AFTER_COUNT = "AFTER_COUNT"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecurringTask(SQLModel, table=True):
    """Recurrence template from which concrete tasks are materialized."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True, max_length=100)

    # Payload stamped onto every generated task
    title: str = Field(max_length=200, min_length=1)
    description: Optional[str] = Field(default=None, max_length=1000)
    priority: str = Field(default=Priority.MEDIUM.value, max_length=20)

    # Rule
    frequency: str = Field(max_length=20)
    interval: int = Field(default=1)
    by_week_day: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))  # ["MO", "WE", "FR"]
    by_month_day: Optional[int] = Field(default=None)  # 1-31, MONTHLY only
    start_date: datetime = Field(sa_type=DateTime, index=True)

    # Termination
    end_type: str = Field(default=EndType.NEVER.value, max_length=20)
    end_date: Optional[datetime] = Field(default=None, sa_type=DateTime)
    count: Optional[int] = Field(default=None)  # total occurrences over the rule's lifetime

    is_active: bool = Field(default=True, index=True)
    last_generated: Optional[datetime] = Field(default=None, sa_type=DateTime)  # advisory watermark
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
