"""Initialize database tables."""
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

# Imported for their side effect of registering tables on the metadata
from recurring_todo.models.recurring_task import RecurringTask  # noqa: F401
from recurring_todo.models.recurrence_exception import RecurrenceException  # noqa: F401
from recurring_todo.models.task import Task  # noqa: F401
from recurring_todo.utils.logger import get_logger

logger = get_logger("recurring_todo.db")


def init_db(target: Optional[Engine] = None) -> None:
    """Create all tables in the database."""
    if target is None:
        from recurring_todo.db.config import engine as target

    logger.info("Creating all tables", url=str(target.url))
    SQLModel.metadata.create_all(target)


if __name__ == "__main__":
    init_db()
