"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries, keeping domain logic pure.
Returns domain models (not SQLAlchemy entities) to external callers.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from trialboard.db.schema import TrainJob, Trial
from trialboard.models.domain import TrainJobEntity, TrialEntity

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _train_job_to_entity(job: TrainJob) -> TrainJobEntity:
    """Convert SQLAlchemy TrainJob to domain entity."""
    return TrainJobEntity(
        train_job_id=job.train_job_id,
        app=job.app,
        app_version=job.app_version,
        status=job.status,
        datetime_started=job.datetime_started,
        datetime_stopped=job.datetime_stopped,
    )


def _trial_to_entity(trial: Trial) -> TrialEntity:
    """Convert SQLAlchemy Trial to domain entity."""
    return TrialEntity(
        id=trial.trial_id,
        model_name=trial.model_name,
        status=trial.status,
        score=trial.score,
        datetime_started=trial.datetime_started,
        datetime_stopped=trial.datetime_stopped,
        train_job_id=trial.train_job_id,
        knobs=json.loads(trial.knobs_json) if trial.knobs_json else None,
    )


# ============================================================================
# Train Job Repository
# ============================================================================


def get_train_job(session: DbSession, app: str, app_version: int) -> TrainJobEntity | None:
    """Get train job by name and version."""
    job = (
        session.query(TrainJob)
        .filter(TrainJob.app == app, TrainJob.app_version == app_version)
        .first()
    )
    return _train_job_to_entity(job) if job else None


def create_train_job(session: DbSession, entity: TrainJobEntity) -> TrainJobEntity:
    """Create a new train job."""
    job = TrainJob(
        train_job_id=entity.train_job_id,
        app=entity.app,
        app_version=entity.app_version,
        status=entity.status,
        datetime_started=entity.datetime_started,
        datetime_stopped=entity.datetime_stopped,
    )
    session.add(job)
    session.flush()
    return entity


# ============================================================================
# Trial Repository
# ============================================================================


def get_trial(session: DbSession, trial_id: str) -> TrialEntity | None:
    """Get trial by ID."""
    trial = session.query(Trial).filter(Trial.trial_id == trial_id).first()
    return _trial_to_entity(trial) if trial else None


def get_trials_for_train_job(session: DbSession, train_job_id: str) -> list[TrialEntity]:
    """Get all trials of a train job, oldest first.

    Ordered by start time then ID so snapshots are deterministic.
    """
    trials = (
        session.query(Trial)
        .filter(Trial.train_job_id == train_job_id)
        .order_by(Trial.datetime_started, Trial.trial_id)
        .all()
    )
    return [_trial_to_entity(t) for t in trials]


def create_trial(session: DbSession, entity: TrialEntity) -> TrialEntity:
    """Create a new trial.

    Raises:
        ValueError: If the entity has no train_job_id.
    """
    if entity.train_job_id is None:
        raise ValueError(f"Trial {entity.id} has no train_job_id")

    trial = Trial(
        trial_id=entity.id,
        train_job_id=entity.train_job_id,
        model_name=entity.model_name,
        status=entity.status,
        score=entity.score,
        knobs_json=json.dumps(entity.knobs) if entity.knobs is not None else None,
        datetime_started=entity.datetime_started,
        datetime_stopped=entity.datetime_stopped,
    )
    session.add(trial)
    session.flush()
    return entity


def commit(session: DbSession) -> None:
    """Commit the current transaction."""
    session.commit()
