"""
Recurring Task Service

Materializes tasks from recurring task templates over a requested window and
manages templates and their per-occurrence exceptions.

Generation is idempotent: the set of already generated tasks is always
re-read from the store, and the store rejects a second task for the same
(template, recurring date), so overlapping or concurrent calls never duplicate.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session

from recurring_todo.config import GENERATION_MAX_WORKERS
from recurring_todo.models.recurring_task import EndType, Priority, RecurringTask
from recurring_todo.models.recurrence_exception import ExceptionAction, RecurrenceException
from recurring_todo.models.task import Task
from recurring_todo.services.errors import (
    ExceptionNotFound,
    InvalidException,
    InvalidTemplate,
    RecurrenceError,
    TemplateNotFound,
)
from recurring_todo.services.exception_resolver import resolve
from recurring_todo.services.recurrence_rules import occurrences
from recurring_todo.services.recurrence_store import RecurrenceStore
from recurring_todo.services.recurrence_validator import RecurrenceValidator
from recurring_todo.utils.dates import to_utc_naive, utcnow
from recurring_todo.utils.logger import get_logger
from recurring_todo.utils.metrics import metrics_collector

logger = get_logger("recurring_todo.service")


@dataclass
class BatchGenerationResult:
    """Per-template outcome of generating every active template of a user."""

    created: Dict[int, int] = field(default_factory=dict)
    errors: Dict[int, str] = field(default_factory=dict)

    @property
    def total_created(self) -> int:
        return sum(self.created.values())


class RecurringTaskService:
    """Service to handle recurring task logic."""

    def __init__(self, engine: Engine, max_workers: int = GENERATION_MAX_WORKERS):
        """Initialize the recurring task service."""
        self.engine = engine
        self.max_workers = max(1, max_workers)

    def _store(self, session: Session) -> RecurrenceStore:
        return RecurrenceStore(session)

    # Generation

    def generate(self, template_id: int, from_date: datetime, to_date: datetime) -> int:
        """
        Materialize the missing tasks of one template inside [from_date, to_date].

        Returns:
            Number of tasks created (0 for an inactive template)

        Raises:
            TemplateNotFound: If the template does not exist
            StorageError: If the store fails
        """
        with Session(self.engine) as session:
            store = self._store(session)
            template = store.load_template(template_id)
            if template is None:
                raise TemplateNotFound(template_id)
            return self._materialize(store, template, to_utc_naive(from_date), to_utc_naive(to_date))

    def materialize(self, template_id: int, from_date: datetime, to_date: datetime) -> int:
        """Like generate, but a missing template is a no-op returning 0."""
        with Session(self.engine) as session:
            store = self._store(session)
            template = store.load_template(template_id)
            if template is None:
                logger.info("Template no longer exists, nothing to generate", template_id=template_id)
                return 0
            return self._materialize(store, template, to_utc_naive(from_date), to_utc_naive(to_date))

    def _materialize(
        self,
        store: RecurrenceStore,
        template: RecurringTask,
        window_start: datetime,
        window_end: datetime,
    ) -> int:
        template_id = template.id
        if not template.is_active:
            metrics_collector.generation_skipped_inactive()
            logger.debug("Template inactive, skipping generation", template_id=template_id)
            return 0

        metrics_collector.generation_run()
        with metrics_collector.time_operation("generation_seconds"):
            existing = store.load_instance_dates(template_id, window_start, window_end)
            exceptions = store.load_exceptions(template_id)
            resolved = resolve(occurrences(template, window_start, window_end), exceptions)

            # Commits expire the template, so copy the payload up front
            payload = {
                "user_id": template.user_id,
                "title": template.title,
                "description": template.description,
                "priority": template.priority,
            }

            created = 0
            for occurrence in resolved:
                if occurrence.original_date in existing:
                    continue
                task = Task(
                    **payload,
                    due_date=occurrence.due_date,
                    recurring_template_id=template_id,
                    recurring_date=occurrence.original_date,
                )
                if store.create_instance(task):
                    created += 1
                else:
                    metrics_collector.instance_conflict()
                    logger.debug(
                        "Task already generated by a concurrent caller",
                        template_id=template_id,
                        recurring_date=occurrence.original_date,
                    )

            store.update_template_watermark(template_id, utcnow())

        metrics_collector.instances_created(created)
        logger.info(
            "Generated recurring tasks",
            template_id=template_id,
            window_start=window_start,
            window_end=window_end,
            occurrences=len(resolved),
            created=created,
        )
        return created

    def generate_all_for_user(
        self, user_id: str, from_date: datetime, to_date: datetime
    ) -> BatchGenerationResult:
        """
        Generate every active template of a user.

        Templates are independent and run on a thread pool; a failing template
        is recorded in the result and does not stop the others.
        """
        with Session(self.engine) as session:
            template_ids = [t.id for t in self._store(session).load_active_templates(user_id)]

        result = BatchGenerationResult()
        if not template_ids:
            return result

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(template_ids))) as executor:
            futures = {
                executor.submit(self.materialize, template_id, from_date, to_date): template_id
                for template_id in template_ids
            }
            for future in as_completed(futures):
                template_id = futures[future]
                try:
                    result.created[template_id] = future.result()
                except RecurrenceError as e:
                    metrics_collector.generation_error()
                    logger.error(
                        "Failed to generate recurring tasks",
                        template_id=template_id,
                        user_id=user_id,
                        error=e.message,
                    )
                    result.errors[template_id] = e.message
                except Exception as e:
                    metrics_collector.generation_error()
                    logger.exception(
                        "Unexpected error generating recurring tasks",
                        template_id=template_id,
                        user_id=user_id,
                        error=str(e),
                    )
                    result.errors[template_id] = str(e)

        logger.info(
            "Generated recurring tasks for user",
            user_id=user_id,
            templates=len(template_ids),
            created=result.total_created,
            failed=len(result.errors),
        )
        return result

    # Exceptions

    def add_exception(
        self,
        template_id: int,
        original_date: datetime,
        action: str,
        new_date: Optional[datetime] = None,
    ) -> RecurrenceException:
        """
        Skip or reschedule a single occurrence.

        Raises:
            InvalidException: Bad action, reschedule without new_date, or an
                exception already exists for this occurrence
            TemplateNotFound: If the template does not exist
        """
        validation = RecurrenceValidator.validate_exception(action, new_date)
        if not validation["valid"]:
            raise InvalidException("; ".join(validation["errors"]), {"errors": validation["errors"]})

        original_date = to_utc_naive(original_date)
        if action == ExceptionAction.RESCHEDULE.value:
            new_date = to_utc_naive(new_date)
        else:
            new_date = None

        with Session(self.engine) as session:
            store = self._store(session)
            if store.load_template(template_id) is None:
                raise TemplateNotFound(template_id)

            duplicate_error = InvalidException(
                "An exception already exists for this occurrence; remove it first",
                {"template_id": template_id, "original_date": original_date.isoformat()},
            )
            if store.find_exception(template_id, original_date) is not None:
                raise duplicate_error

            exception = store.create_exception(
                RecurrenceException(
                    recurring_task_id=template_id,
                    original_date=original_date,
                    action=action,
                    new_date=new_date,
                )
            )
            if exception is None:
                raise duplicate_error

        logger.info(
            "Added recurrence exception",
            template_id=template_id,
            exception_id=exception.id,
            action=action,
            original_date=original_date,
        )
        return exception

    def remove_exception(self, exception_id: int, template_id: Optional[int] = None) -> None:
        """Remove an exception; with template_id, it must belong to that template."""
        with Session(self.engine) as session:
            store = self._store(session)
            exception = store.load_exception(exception_id)
            if exception is None or (
                template_id is not None and exception.recurring_task_id != template_id
            ):
                raise ExceptionNotFound(exception_id)
            store.delete_exception(exception)
        logger.info("Removed recurrence exception", exception_id=exception_id)

    def list_exceptions(self, template_id: int) -> List[RecurrenceException]:
        with Session(self.engine) as session:
            return self._store(session).load_exceptions(template_id)

    # Templates

    def create_template(
        self,
        user_id: str,
        title: str,
        frequency: str,
        start_date: datetime,
        description: Optional[str] = None,
        priority: str = Priority.MEDIUM.value,
        interval: Optional[int] = None,
        by_week_day: Optional[List[str]] = None,
        by_month_day: Optional[int] = None,
        end_type: str = EndType.NEVER.value,
        end_date: Optional[datetime] = None,
        count: Optional[int] = None,
    ) -> RecurringTask:
        """
        Validate and store a new recurring task template.

        Raises:
            InvalidTemplate: If the rule or payload is malformed
        """
        data: Dict[str, Any] = {
            "title": title,
            "description": description,
            "priority": priority or Priority.MEDIUM.value,
            "frequency": frequency,
            "interval": 1 if interval is None else interval,
            "by_week_day": [code.upper() for code in by_week_day] if by_week_day else None,
            "by_month_day": by_month_day,
            "start_date": to_utc_naive(start_date),
            "end_type": end_type or EndType.NEVER.value,
            "end_date": to_utc_naive(end_date),
            "count": count,
        }

        validation = RecurrenceValidator.validate_template(data)
        if not validation["valid"]:
            raise InvalidTemplate("; ".join(validation["errors"]), {"errors": validation["errors"]})
        for warning in validation["warnings"]:
            logger.warning("Recurring task template warning", user_id=user_id, warning=warning)

        with Session(self.engine) as session:
            template = self._store(session).save_template(RecurringTask(user_id=user_id, **data))

        logger.info(
            "Created recurring task template",
            template_id=template.id,
            user_id=user_id,
            frequency=frequency,
        )
        return template

    def get_template(self, template_id: int, user_id: str) -> RecurringTask:
        """Get a template owned by the user, or raise TemplateNotFound."""
        with Session(self.engine) as session:
            template = self._store(session).load_template(template_id)
        if template is None or template.user_id != user_id:
            raise TemplateNotFound(template_id)
        return template

    def list_templates(self, user_id: str) -> List[RecurringTask]:
        with Session(self.engine) as session:
            return self._store(session).list_templates(user_id)

    def list_instances(self, template_id: int) -> List[Task]:
        with Session(self.engine) as session:
            return self._store(session).list_instances(template_id)

    def update_template(
        self,
        template_id: int,
        user_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> RecurringTask:
        """Update the payload or active flag of a template; the rule never changes."""
        if title is not None and not title.strip():
            raise InvalidTemplate("Title is required")
        if priority is not None and priority not in [p.value for p in Priority]:
            raise InvalidTemplate(f"Priority must be one of: high, medium, low, got: {priority}")

        with Session(self.engine) as session:
            store = self._store(session)
            template = store.load_template(template_id)
            if template is None or template.user_id != user_id:
                raise TemplateNotFound(template_id)

            if title is not None:
                template.title = title
            if description is not None:
                template.description = description
            if priority is not None:
                template.priority = priority
            if is_active is not None:
                template.is_active = is_active
            template.updated_at = utcnow()
            template = store.save_template(template)

        logger.info("Updated recurring task template", template_id=template_id, is_active=template.is_active)
        return template

    def delete_template(self, template_id: int, user_id: str) -> None:
        """Delete a template with its exceptions and generated tasks."""
        with Session(self.engine) as session:
            store = self._store(session)
            template = store.load_template(template_id)
            if template is None or template.user_id != user_id:
                raise TemplateNotFound(template_id)
            store.delete_template(template)
        logger.info("Deleted recurring task template", template_id=template_id, user_id=user_id)
