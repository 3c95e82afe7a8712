"""Shared pytest fixtures for trialboard tests."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from trialboard.db.schema import Base
from trialboard.models.domain import TrialEntity

T0 = datetime(2024, 1, 1, 12, 0, 0)


def at(seconds: float) -> datetime:
    """Timestamp `seconds` after T0."""
    return T0 + timedelta(seconds=seconds)


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def make_trial():
    """Factory for TrialEntity with offsets in seconds from T0."""

    def _make_trial(
        id: str,
        model_name: str = "M",
        status: str = "COMPLETED",
        score: float | None = None,
        start: float = 0,
        stop: float | None = None,
        train_job_id: str | None = None,
    ) -> TrialEntity:
        return TrialEntity(
            id=id,
            model_name=model_name,
            status=status,
            score=score,
            datetime_started=at(start),
            datetime_stopped=at(stop) if stop is not None else None,
            train_job_id=train_job_id,
        )

    return _make_trial
