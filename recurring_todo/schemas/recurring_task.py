"""Recurring task schemas."""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RecurringTaskCreate(BaseModel):
    """Schema for creating a recurring task template."""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    priority: Optional[str] = Field(default="medium", pattern=r"^(high|medium|low)$")
    frequency: str = Field(..., pattern=r"^(DAILY|WEEKLY|MONTHLY|YEARLY)$")
    interval: Optional[int] = Field(default=1, ge=1)
    by_week_day: Optional[List[str]] = Field(None, max_length=7)  # ["MO", "WE", "FR"]
    by_month_day: Optional[int] = Field(None, ge=1, le=31)
    start_date: datetime
    end_type: Optional[str] = Field(default="NEVER", pattern=r"^(NEVER|ON_DATE|AFTER_COUNT)$")
    end_date: Optional[datetime] = None
    count: Optional[int] = Field(None, ge=1)


class RecurringTaskUpdate(BaseModel):
    """Schema for updating a template; the rule itself is immutable."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    priority: Optional[str] = Field(None, pattern=r"^(high|medium|low)$")
    is_active: Optional[bool] = None


class RecurringTaskResponse(BaseModel):
    """Schema for recurring task template responses."""
    id: int
    user_id: str
    title: str
    description: Optional[str]
    priority: str
    frequency: str
    interval: int
    by_week_day: Optional[List[str]] = None
    by_month_day: Optional[int] = None
    start_date: datetime
    end_type: str
    end_date: Optional[datetime] = None
    count: Optional[int] = None
    is_active: bool
    last_generated: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecurrenceExceptionCreate(BaseModel):
    """Schema for skipping or rescheduling one occurrence."""
    original_date: datetime
    action: str = Field(..., pattern=r"^(skip|reschedule)$")
    new_date: Optional[datetime] = None


class RecurrenceExceptionResponse(BaseModel):
    id: int
    recurring_task_id: int
    original_date: datetime
    action: str
    new_date: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GeneratedTaskResponse(BaseModel):
    """A task materialized from a template."""
    id: int
    user_id: str
    title: str
    description: Optional[str]
    completed: bool
    priority: str
    due_date: Optional[datetime]
    recurring_template_id: Optional[int]
    recurring_date: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class RecurringTaskDetail(RecurringTaskResponse):
    """Template together with its exceptions and generated tasks."""
    exceptions: List[RecurrenceExceptionResponse] = []
    instances: List[GeneratedTaskResponse] = []


class GenerateRequest(BaseModel):
    """Window to materialize, both ends inclusive."""
    from_date: datetime
    to_date: datetime


class GenerateResponse(BaseModel):
    created: int


class BatchGenerateResponse(BaseModel):
    created: Dict[int, int]
    errors: Dict[int, str]
    total_created: int
