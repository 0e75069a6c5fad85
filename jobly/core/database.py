import re
import sqlite3
from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, Result
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker
from jobly.core.config import settings


def make_engine(url: str, **kwargs) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    SQLite connections get foreign key enforcement switched on, since the
    write paths rely on the store to reject dangling company/user/job references.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)  # Verify connections before using them
        kwargs.setdefault("pool_size", 10)
        kwargs.setdefault("max_overflow", 20)

    new_engine = create_engine(url, **kwargs)

    if new_engine.dialect.name == "sqlite":
        # sqlite3 cannot bind Decimal (job equity) on its own
        sqlite3.register_adapter(Decimal, str)

        @event.listens_for(new_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


# Create SQLAlchemy engine
engine = make_engine(settings.DATABASE_URL)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

_PLACEHOLDER = re.compile(r"\$(\d+)")


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def run_query(db: Session, sql: str, values: Sequence[Any] = ()) -> Result:
    """
    Execute a statement written with positional ``$1, $2, ...`` placeholders.

    The placeholders produced by the query builders are rewritten to named
    bind parameters (``:p1, :p2, ...``) so values always travel separately
    from the SQL text.

    Args:
        db: Database session
        sql: Statement text using ``$n`` placeholders (1-indexed)
        values: Positional values, ``values[0]`` binds to ``$1``

    Returns:
        SQLAlchemy Result for the executed statement
    """
    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
    return db.execute(text(_PLACEHOLDER.sub(r":p\1", sql)), params)


def init_db(bind: Engine = None):
    """
    Initialize database.

    Registers the models and creates any missing tables. There is no
    migration tooling; the metadata is the schema.
    """
    from jobly import models  # noqa: F401  Import models to register them
    Base.metadata.create_all(bind=bind or engine)


def close_db(bind: Engine = None):
    """Release every pooled connection. Called at application shutdown."""
    (bind or engine).dispose()
