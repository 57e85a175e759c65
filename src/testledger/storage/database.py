"""Database connection and session management for testledger."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import create_engine as _create_engine
from sqlalchemy.orm import Session, sessionmaker

from testledger.storage.models import Base

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Engine


def create_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine.

    Args:
        database_url: Database connection URL.
        echo: Whether to log SQL statements.

    Returns:
        Engine instance.
    """
    # Plain postgres URLs go through psycopg (v3)
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+psycopg://", 1)

    return _create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
    )


def get_session_maker(engine: Engine) -> sessionmaker[Session]:
    """
    Create a session maker.

    Args:
        engine: SQLAlchemy engine.

    Returns:
        Session maker.
    """
    return sessionmaker(
        bind=engine,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )


@contextmanager
def session_scope(session_maker: sessionmaker[Session]) -> Iterator[Session]:
    """
    Provide a transactional scope around a series of operations.

    Yields:
        Session that is committed on success and rolled back on error.
    """
    with session_maker() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


def init_schema(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)
