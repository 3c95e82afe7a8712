"""Train jobs API endpoints.

GET  /api/train_jobs/{app}/{app_version}        - Train job overview (summaries, plots, trials)
GET  /api/train_jobs/{app}/{app_version}/trials - All trials of a train job
POST /api/train_jobs/{app}/{app_version}/trials - Record a trial
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError

from trialboard.aggregation.series import get_plot_details, plot_id_for_model
from trialboard.aggregation.summary import MalformedTrialError, summarize_trials
from trialboard.api.app import get_db_session
from trialboard.api.routes.trials import build_trial_detail
from trialboard.core.durations import (
    NOT_STOPPED,
    humanize_duration,
    humanize_since,
    humanize_trial_duration,
    to_naive_utc,
    trial_duration,
)
from trialboard.db import repo
from trialboard.db.repo import DbSession
from trialboard.models.domain import ModelSummary, TrainJobEntity, TrialEntity
from trialboard.models.types import (
    AxisDetail,
    ModelSummaryDetail,
    PlotDetail,
    PlotPointDetail,
    PlotSeriesDetail,
    TrainJobOverview,
    TrialDetail,
    TrialRow,
    TrialSubmission,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _build_trial_row(trial: TrialEntity, now: datetime) -> TrialRow:
    """Build a trials table row from a TrialEntity."""
    duration = trial_duration(trial)
    return TrialRow(
        trial_id=trial.id,
        model_name=trial.model_name,
        status=trial.status,
        score=trial.score,
        datetime_started=trial.datetime_started,
        datetime_stopped=trial.datetime_stopped,
        started=humanize_since(trial.datetime_started, now),
        stopped=(
            humanize_since(trial.datetime_stopped, now)
            if trial.datetime_stopped is not None
            else NOT_STOPPED
        ),
        duration_seconds=duration.total_seconds() if duration is not None else None,
        duration=humanize_trial_duration(trial),
    )


def _build_plot_detail(summary: ModelSummary) -> PlotDetail:
    """Build the best-score plot payload of a model summary."""
    series, plot_option = get_plot_details(summary.completed_trials)
    return PlotDetail(
        plot_id=plot_id_for_model(summary.model),
        title=plot_option.title,
        x_axis=AxisDetail(name=plot_option.x_axis.name, type=plot_option.x_axis.type),
        series=[
            PlotSeriesDetail(
                name=s.name,
                data=[PlotPointDetail(timestamp=p.timestamp, value=p.value) for p in s.data],
            )
            for s in series
        ],
    )


def _build_summary_detail(summary: ModelSummary) -> ModelSummaryDetail:
    """Build a model card from a ModelSummary."""
    return ModelSummaryDetail(
        model=summary.model,
        status=summary.status,
        completed_trial_count=summary.completed_count,
        completed_trial_ids=[t.id for t in summary.completed_trials],
        total_duration_seconds=summary.total_duration.total_seconds(),
        total_duration=humanize_duration(summary.total_duration),
        best_trial_id=summary.best_trial.id,
        best_score=summary.best_trial.score,
        plot=_build_plot_detail(summary),
    )


def _get_train_job_or_404(session: DbSession, app: str, app_version: int) -> TrainJobEntity:
    train_job = repo.get_train_job(session, app, app_version)
    if train_job is None:
        raise HTTPException(status_code=404, detail="Train job not found")
    return train_job


@router.get("/train_jobs/{app}/{app_version}", response_model=TrainJobOverview)
def get_train_job(
    app: str,
    app_version: int,
    session: DbSession = Depends(get_db_session),
) -> TrainJobOverview:
    """Get train job overview.

    Args:
        app: Train job name.
        app_version: Train job version.
        session: Database session (injected).

    Returns:
        TrainJobOverview with model summaries, their plots, and all trials.

    Raises:
        HTTPException: 404 if train job not found, 422 if a trial is malformed.
    """
    train_job = _get_train_job_or_404(session, app, app_version)
    trials = repo.get_trials_for_train_job(session, train_job.train_job_id)

    try:
        summaries = summarize_trials(trials)
        summary_details = [_build_summary_detail(s) for s in summaries]
    except MalformedTrialError as e:
        logger.warning(f"Cannot summarize {app} v{app_version}: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e

    now = datetime.now(timezone.utc)
    return TrainJobOverview(
        train_job_id=train_job.train_job_id,
        app=train_job.app,
        app_version=train_job.app_version,
        status=train_job.status,
        model_summaries=summary_details,
        trials=[_build_trial_row(t, now) for t in trials],
    )


@router.get("/train_jobs/{app}/{app_version}/trials", response_model=list[TrialRow])
def get_train_job_trials(
    app: str,
    app_version: int,
    session: DbSession = Depends(get_db_session),
) -> list[TrialRow]:
    """Get all trials of a train job.

    Raises:
        HTTPException: 404 if train job not found.
    """
    train_job = _get_train_job_or_404(session, app, app_version)
    trials = repo.get_trials_for_train_job(session, train_job.train_job_id)

    now = datetime.now(timezone.utc)
    return [_build_trial_row(t, now) for t in trials]


@router.post(
    "/train_jobs/{app}/{app_version}/trials",
    response_model=TrialDetail,
    status_code=201,
)
def create_train_job_trial(
    app: str,
    app_version: int,
    submission: TrialSubmission,
    session: DbSession = Depends(get_db_session),
) -> TrialDetail:
    """Record a trial for a train job.

    Raises:
        HTTPException: 404 if train job not found, 409 if the trial ID exists.
    """
    train_job = _get_train_job_or_404(session, app, app_version)

    trial = TrialEntity(
        id=submission.trial_id,
        model_name=submission.model_name,
        status=submission.status,
        score=submission.score,
        datetime_started=to_naive_utc(submission.datetime_started),
        datetime_stopped=(
            to_naive_utc(submission.datetime_stopped)
            if submission.datetime_stopped is not None
            else None
        ),
        train_job_id=train_job.train_job_id,
        knobs=submission.knobs,
    )

    try:
        repo.create_trial(session, trial)
        repo.commit(session)
    except IntegrityError as e:
        session.rollback()
        raise HTTPException(status_code=409, detail="Trial already exists") from e

    logger.info(
        f"Recorded trial {trial.id} ({trial.model_name}, {trial.status}) for {app} v{app_version}"
    )
    return build_trial_detail(trial)
