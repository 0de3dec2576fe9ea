"""Persistence for recurring task templates, their exceptions and generated tasks."""
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, Set

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from recurring_todo.models.recurring_task import RecurringTask
from recurring_todo.models.recurrence_exception import RecurrenceException
from recurring_todo.models.task import Task
from recurring_todo.services.errors import StorageError
from recurring_todo.utils.logger import get_logger

logger = get_logger("recurring_todo.store")


class RecurrenceStore:
    """Store operations over a single SQLModel session.

    Every SQLAlchemy failure surfaces as StorageError, except the duplicate
    generated task, which create_instance reports by returning False.
    """

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _storage(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Storage operation failed", operation=operation, error=str(exc))
            raise StorageError(f"Storage failure during {operation}", {"operation": operation}) from exc

    # Templates

    def load_template(self, template_id: int) -> Optional[RecurringTask]:
        with self._storage("load_template"):
            return self.session.get(RecurringTask, template_id)

    def load_active_templates(self, user_id: str) -> List[RecurringTask]:
        statement = (
            select(RecurringTask)
            .where(RecurringTask.user_id == user_id)
            .where(RecurringTask.is_active == True)  # noqa: E712
            .order_by(RecurringTask.id)
        )
        with self._storage("load_active_templates"):
            return list(self.session.exec(statement).all())

    def list_templates(self, user_id: str) -> List[RecurringTask]:
        statement = (
            select(RecurringTask)
            .where(RecurringTask.user_id == user_id)
            .order_by(RecurringTask.created_at.desc(), RecurringTask.id.desc())
        )
        with self._storage("list_templates"):
            return list(self.session.exec(statement).all())

    def save_template(self, template: RecurringTask) -> RecurringTask:
        with self._storage("save_template"):
            self.session.add(template)
            self.session.commit()
            self.session.refresh(template)
        return template

    def delete_template(self, template: RecurringTask) -> None:
        """Delete a template together with its exceptions and generated tasks."""
        with self._storage("delete_template"):
            for task in self.session.exec(
                select(Task).where(Task.recurring_template_id == template.id)
            ).all():
                self.session.delete(task)
            for exception in self.session.exec(
                select(RecurrenceException).where(RecurrenceException.recurring_task_id == template.id)
            ).all():
                self.session.delete(exception)
            self.session.delete(template)
            self.session.commit()

    def update_template_watermark(self, template_id: int, timestamp: datetime) -> bool:
        """Stamp last_generated; returns False when the template no longer exists."""
        with self._storage("update_template_watermark"):
            template = self.session.get(RecurringTask, template_id)
            if template is None:
                return False
            template.last_generated = timestamp
            self.session.add(template)
            self.session.commit()
        return True

    # Exceptions

    def load_exceptions(self, template_id: int) -> List[RecurrenceException]:
        statement = (
            select(RecurrenceException)
            .where(RecurrenceException.recurring_task_id == template_id)
            .order_by(RecurrenceException.original_date)
        )
        with self._storage("load_exceptions"):
            return list(self.session.exec(statement).all())

    def find_exception(self, template_id: int, original_date: datetime) -> Optional[RecurrenceException]:
        statement = (
            select(RecurrenceException)
            .where(RecurrenceException.recurring_task_id == template_id)
            .where(RecurrenceException.original_date == original_date)
        )
        with self._storage("find_exception"):
            return self.session.exec(statement).first()

    def load_exception(self, exception_id: int) -> Optional[RecurrenceException]:
        with self._storage("load_exception"):
            return self.session.get(RecurrenceException, exception_id)

    def create_exception(self, exception: RecurrenceException) -> Optional[RecurrenceException]:
        """Insert an exception; returns None if one already exists for that date."""
        try:
            self.session.add(exception)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if self.find_exception(exception.recurring_task_id, exception.original_date) is not None:
                return None
            raise StorageError("Storage failure during create_exception") from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError("Storage failure during create_exception") from exc
        self.session.refresh(exception)
        return exception

    def delete_exception(self, exception: RecurrenceException) -> None:
        with self._storage("delete_exception"):
            self.session.delete(exception)
            self.session.commit()

    # Generated tasks

    def load_instance_dates(self, template_id: int, start: datetime, end: datetime) -> Set[datetime]:
        """Recurring dates of tasks already generated for the template inside [start, end]."""
        statement = (
            select(Task.recurring_date)
            .where(Task.recurring_template_id == template_id)
            .where(Task.recurring_date >= start)
            .where(Task.recurring_date <= end)
        )
        with self._storage("load_instance_dates"):
            return set(self.session.exec(statement).all())

    def list_instances(self, template_id: int) -> List[Task]:
        statement = (
            select(Task)
            .where(Task.recurring_template_id == template_id)
            .order_by(Task.recurring_date)
        )
        with self._storage("list_instances"):
            return list(self.session.exec(statement).all())

    def instance_exists(self, template_id: int, recurring_date: datetime) -> bool:
        statement = (
            select(Task.id)
            .where(Task.recurring_template_id == template_id)
            .where(Task.recurring_date == recurring_date)
        )
        with self._storage("instance_exists"):
            return self.session.exec(statement).first() is not None

    def create_instance(self, task: Task) -> bool:
        """
        Conditionally insert a generated task.

        Returns:
            True if created, False if a task for the same template and
            recurring date already exists (a concurrent caller won)
        """
        try:
            self.session.add(task)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if self.instance_exists(task.recurring_template_id, task.recurring_date):
                return False
            raise StorageError(
                "Storage failure during create_instance",
                {"template_id": task.recurring_template_id},
            ) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(
                "Storage failure during create_instance",
                {"template_id": task.recurring_template_id},
            ) from exc
        return True
