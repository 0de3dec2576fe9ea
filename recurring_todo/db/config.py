"""Database configuration for the recurring task engine."""
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import create_engine

from recurring_todo.config import DATABASE_URL


def build_engine(database_url: str = DATABASE_URL) -> Engine:
    """Create a SQLModel engine, enabling foreign keys for SQLite."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=False, pool_pre_ping=True)

    # SQLite connections are shared across the batch generation threads
    engine = create_engine(
        database_url, echo=False, connect_args={"check_same_thread": False}
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


engine = build_engine()

