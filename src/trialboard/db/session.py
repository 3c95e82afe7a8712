"""Database session management.

Provides engine and session factories for the SQLite trial store.
The database location comes from an explicit path, then the
TRIALBOARD_DB_PATH environment variable, then data/trialboard.db.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from trialboard.db.schema import Base

logger = logging.getLogger(__name__)

DB_PATH_ENV = "TRIALBOARD_DB_PATH"
DEFAULT_DB_PATH = Path("data/trialboard.db")

# Engines and session factories cached by resolved db path
_engine_cache: dict[str, Engine] = {}
_session_factory_cache: dict[str, sessionmaker] = {}


def resolve_db_path(db_path: Path | str | None = None) -> Path:
    """Resolve the database file path.

    Args:
        db_path: Explicit path. Takes precedence over the environment.

    Returns:
        Path to the SQLite database file.
    """
    if db_path is not None:
        return Path(db_path)
    env_path = os.environ.get(DB_PATH_ENV)
    if env_path:
        return Path(env_path)
    return DEFAULT_DB_PATH


def get_engine(db_path: Path | str | None = None) -> Engine:
    """Get the (cached) SQLAlchemy engine for the database.

    Uses StaticPool and check_same_thread=False so a single SQLite
    connection can be shared by FastAPI worker threads.

    Args:
        db_path: Path to SQLite database file.

    Returns:
        SQLAlchemy engine instance.
    """
    path = resolve_db_path(db_path)
    cache_key = str(path.resolve())

    engine = _engine_cache.get(cache_key)
    if engine is None:
        path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{path}",
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        _engine_cache[cache_key] = engine
        logger.debug(f"Created engine for {path}")

    return engine


def get_session(db_path: Path | str | None = None) -> Session:
    """Get a database session.

    Note: Caller is responsible for closing the session. Use
    session_scope() for automatic commit/rollback/close.
    """
    cache_key = str(resolve_db_path(db_path).resolve())

    factory = _session_factory_cache.get(cache_key)
    if factory is None:
        factory = sessionmaker(bind=get_engine(db_path))
        _session_factory_cache[cache_key] = factory

    return factory()


@contextmanager
def session_scope(db_path: Path | str | None = None) -> Generator[Session, None, None]:
    """Context manager for database sessions with automatic cleanup.

    Commits on successful exit, rolls back on exception, and always
    closes the session.

    Example:
        with session_scope() as session:
            repo.create_trial(session, trial)
    """
    session = get_session(db_path)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(db_path: Path | str | None = None) -> None:
    """Create all tables. Safe to call on an existing database."""
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)
    logger.info(f"Initialized database at {resolve_db_path(db_path)}")
