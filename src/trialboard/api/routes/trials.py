"""Trials API endpoint.

GET /api/trials/{trial_id} - Get trial detail
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from trialboard.api.app import get_db_session
from trialboard.core.durations import trial_duration
from trialboard.db import repo
from trialboard.db.repo import DbSession
from trialboard.models.domain import TrialEntity
from trialboard.models.types import TrialDetail

router = APIRouter()


def build_trial_detail(trial: TrialEntity) -> TrialDetail:
    """Build TrialDetail from TrialEntity."""
    duration = trial_duration(trial)
    return TrialDetail(
        trial_id=trial.id,
        train_job_id=trial.train_job_id,
        model_name=trial.model_name,
        status=trial.status,
        score=trial.score,
        knobs=trial.knobs,
        datetime_started=trial.datetime_started,
        datetime_stopped=trial.datetime_stopped,
        duration_seconds=duration.total_seconds() if duration is not None else None,
    )


@router.get("/trials/{trial_id}", response_model=TrialDetail)
def get_trial(
    trial_id: str,
    session: DbSession = Depends(get_db_session),
) -> TrialDetail:
    """Get trial detail.

    Args:
        trial_id: Trial ID to fetch.
        session: Database session (injected).

    Returns:
        TrialDetail with trial data.

    Raises:
        HTTPException: 404 if trial not found.
    """
    trial = repo.get_trial(session, trial_id)

    if trial is None:
        raise HTTPException(status_code=404, detail="Trial not found")

    return build_trial_detail(trial)
