"""Database engine and session management."""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine  # noqa: TCH002
from sqlalchemy.orm import Session, sessionmaker

from bidderround.state.models import Base


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str = "sqlite:///bidderround.db", echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine.

    SQLite does not enforce foreign keys unless asked to on every
    connection, so a connect hook turns them on.
    """
    engine = create_engine(url, echo=echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def init_db(engine: Engine) -> None:
    """Create all tables if they don't exist."""
    Base.metadata.create_all(engine)


def get_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Get a session factory bound to the given engine."""
    return sessionmaker(bind=engine)
