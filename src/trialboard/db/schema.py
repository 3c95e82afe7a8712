"""Database schema for trialboard.

Train jobs own trials; the unique constraint on (app, app_version)
keeps one train job per named version.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TrainJob(Base):
    """A named, versioned collection of trials.

    Invariant: UNIQUE(app, app_version)
    """

    __tablename__ = "train_jobs"

    train_job_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    app: Mapped[str] = mapped_column(String(128), nullable=False)
    app_version: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="STARTED")
    datetime_started: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    datetime_stopped: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (UniqueConstraint("app", "app_version", name="uq_train_job_version"),)


class Trial(Base):
    """One training run of a model configuration within a train job."""

    __tablename__ = "trials"

    trial_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    train_job_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("train_jobs.train_job_id"), nullable=False
    )
    model_name: Mapped[str] = mapped_column(String(128), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="RUNNING")
    score: Mapped[float | None] = mapped_column(Float, nullable=True)
    knobs_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    datetime_started: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    datetime_stopped: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
