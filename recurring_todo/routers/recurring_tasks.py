"""Recurring task router."""
from datetime import timedelta
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from recurring_todo.config import INITIAL_GENERATION_DAYS
from recurring_todo.db.config import engine
from recurring_todo.schemas.recurring_task import (
    BatchGenerateResponse,
    GenerateRequest,
    GenerateResponse,
    RecurrenceExceptionCreate,
    RecurrenceExceptionResponse,
    RecurringTaskCreate,
    RecurringTaskDetail,
    RecurringTaskResponse,
    RecurringTaskUpdate,
)
from recurring_todo.services.errors import (
    ExceptionNotFound,
    InvalidException,
    InvalidTemplate,
    RecurrenceError,
    StorageError,
    TemplateNotFound,
)
from recurring_todo.services.recurring_task_service import RecurringTaskService
from recurring_todo.utils.dates import to_utc_naive, utcnow

router = APIRouter(tags=["Recurring Tasks"])  # No prefix since main.py adds /api prefix

_ERROR_STATUS = {
    InvalidTemplate: status.HTTP_400_BAD_REQUEST,
    InvalidException: status.HTTP_400_BAD_REQUEST,
    TemplateNotFound: status.HTTP_404_NOT_FOUND,
    ExceptionNotFound: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_recurring_task_service() -> RecurringTaskService:
    """Dependency for getting RecurringTaskService instance."""
    return RecurringTaskService(engine)


def _http_error(error: RecurrenceError) -> HTTPException:
    return HTTPException(
        status_code=_ERROR_STATUS.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail={"code": error.code, "message": error.message, "details": error.details},
    )


@router.get("/{user_id}/recurring-tasks", response_model=List[RecurringTaskResponse])
async def list_recurring_tasks(
    user_id: str,
    service: RecurringTaskService = Depends(get_recurring_task_service),
):
    """List recurring task templates for the user, newest first."""
    try:
        return service.list_templates(user_id)
    except RecurrenceError as e:
        raise _http_error(e)


@router.post(
    "/{user_id}/recurring-tasks",
    response_model=RecurringTaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_recurring_task(
    user_id: str,
    template_data: RecurringTaskCreate,
    service: RecurringTaskService = Depends(get_recurring_task_service),
):
    """Create a recurring task and generate its first tasks."""
    try:
        template = service.create_template(user_id=user_id, **template_data.model_dump())

        now = utcnow()
        service.generate(template.id, now, now + timedelta(days=INITIAL_GENERATION_DAYS))
        return service.get_template(template.id, user_id)
    except RecurrenceError as e:
        raise _http_error(e)


# Declared before /{template_id} routes so "generate" is not parsed as an id
@router.post("/{user_id}/recurring-tasks/generate", response_model=BatchGenerateResponse)
async def generate_all_recurring_tasks(
    user_id: str,
    window: GenerateRequest,
    service: RecurringTaskService = Depends(get_recurring_task_service),
):
    """Generate tasks for every active recurring task of the user."""
    if to_utc_naive(window.from_date) > to_utc_naive(window.to_date):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from_date must not be after to_date",
        )
    try:
        result = service.generate_all_for_user(user_id, window.from_date, window.to_date)
    except RecurrenceError as e:
        raise _http_error(e)
    return BatchGenerateResponse(
        created=result.created, errors=result.errors, total_created=result.total_created
    )


@router.get("/{user_id}/recurring-tasks/{template_id}", response_model=RecurringTaskDetail)
async def get_recurring_task(
    user_id: str,
    template_id: int,
    service: RecurringTaskService = Depends(get_recurring_task_service),
):
    """Get a recurring task with its exceptions and generated tasks."""
    try:
        template = service.get_template(template_id, user_id)
        exceptions = service.list_exceptions(template_id)
        instances = service.list_instances(template_id)
    except RecurrenceError as e:
        raise _http_error(e)

    return RecurringTaskDetail.model_validate(
        {
            **template.model_dump(),
            "exceptions": [exception.model_dump() for exception in exceptions],
            "instances": [instance.model_dump() for instance in instances],
        }
    )


@router.put("/{user_id}/recurring-tasks/{template_id}", response_model=RecurringTaskResponse)
async def update_recurring_task(
    user_id: str,
    template_id: int,
    template_data: RecurringTaskUpdate,
    service: RecurringTaskService = Depends(get_recurring_task_service),
):
    """Update title, description, priority or active flag of a recurring task."""
    try:
        return service.update_template(
            template_id,
            user_id,
            title=template_data.title,
            description=template_data.description,
            priority=template_data.priority,
            is_active=template_data.is_active,
        )
    except RecurrenceError as e:
        raise _http_error(e)


@router.delete("/{user_id}/recurring-tasks/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recurring_task(
    user_id: str,
    template_id: int,
    service: RecurringTaskService = Depends(get_recurring_task_service),
):
    """Delete a recurring task with its exceptions and generated tasks."""
    try:
        service.delete_template(template_id, user_id)
    except RecurrenceError as e:
        raise _http_error(e)


@router.post("/{user_id}/recurring-tasks/{template_id}/generate", response_model=GenerateResponse)
async def generate_recurring_task(
    user_id: str,
    template_id: int,
    window: GenerateRequest,
    service: RecurringTaskService = Depends(get_recurring_task_service),
):
    """Manually trigger task generation for a date range."""
    if to_utc_naive(window.from_date) > to_utc_naive(window.to_date):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from_date must not be after to_date",
        )
    try:
        service.get_template(template_id, user_id)
        created = service.generate(template_id, window.from_date, window.to_date)
    except RecurrenceError as e:
        raise _http_error(e)
    return GenerateResponse(created=created)


@router.post(
    "/{user_id}/recurring-tasks/{template_id}/exceptions",
    response_model=RecurrenceExceptionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_recurrence_exception(
    user_id: str,
    template_id: int,
    exception_data: RecurrenceExceptionCreate,
    service: RecurringTaskService = Depends(get_recurring_task_service),
):
    """Skip or reschedule a single occurrence."""
    try:
        service.get_template(template_id, user_id)
        return service.add_exception(
            template_id,
            exception_data.original_date,
            exception_data.action,
            exception_data.new_date,
        )
    except RecurrenceError as e:
        raise _http_error(e)


@router.delete(
    "/{user_id}/recurring-tasks/{template_id}/exceptions/{exception_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_recurrence_exception(
    user_id: str,
    template_id: int,
    exception_id: int,
    service: RecurringTaskService = Depends(get_recurring_task_service),
):
    """Remove an exception so the occurrence is generated normally again."""
    try:
        service.get_template(template_id, user_id)
        service.remove_exception(exception_id, template_id=template_id)
    except RecurrenceError as e:
        raise _http_error(e)
