"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import structlog

from testledger.config import Settings
from testledger.storage.database import create_engine, get_session_maker, init_schema

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from sqlalchemy import Engine
    from sqlalchemy.orm import Session, sessionmaker

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo logging configuration done by the code under test."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def settings() -> Settings:
    """Settings that ignore the environment and any .env file."""
    return Settings(_env_file=None, database_url=None)


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """URL of a fresh SQLite database file."""
    return f"sqlite:///{tmp_path / 'results.db'}"


@pytest.fixture
def engine(database_url: str) -> Generator[Engine, None, None]:
    """Engine with the results schema created."""
    engine = create_engine(database_url)
    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_maker(engine: Engine) -> sessionmaker[Session]:
    return get_session_maker(engine)
