"""Per-model trial summary aggregation.

Groups a train job's trials by model and derives, for each model,
the best trial, completion status, and cumulative trial duration.
Domain logic is pure - database operations go through repo.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import timedelta

from trialboard.core.durations import as_utc
from trialboard.db import repo
from trialboard.db.repo import DbSession
from trialboard.models.domain import ModelSummary, TrialEntity

logger = logging.getLogger(__name__)


class MalformedTrialError(ValueError):
    """Raised when a trial violates the status/timestamp/score invariants."""

    def __init__(self, trial_id: str, reason: str):
        self.trial_id = trial_id
        self.reason = reason
        super().__init__(f"Malformed trial {trial_id}: {reason}")


def summarize_train_job(
    session: DbSession,
    app: str,
    app_version: int,
) -> list[ModelSummary]:
    """Compute model summaries for a train job.

    Args:
        session: Database session.
        app: Train job name.
        app_version: Train job version.

    Returns:
        One ModelSummary per model with at least one completed trial.

    Raises:
        LookupError: If the train job does not exist.
        MalformedTrialError: If any stored trial violates the trial invariants.
    """
    train_job = repo.get_train_job(session, app, app_version)
    if train_job is None:
        raise LookupError(f"Train job not found: {app} v{app_version}")

    trials = repo.get_trials_for_train_job(session, train_job.train_job_id)
    return summarize_trials(trials)


def summarize_trials(trials: Iterable[TrialEntity]) -> list[ModelSummary]:
    """Summarize a trial snapshot per model.

    Models are emitted in first-seen order. A model with no completed
    trials produces no summary, even when it has running or failed trials.

    Args:
        trials: Full trial snapshot of a train job.

    Returns:
        List of ModelSummary, one per model with completed trials.

    Raises:
        MalformedTrialError: If a completed trial has no stop time, stops
            before it started, or carries a non-numeric score. The whole
            call fails; no partial summary list is returned.
    """
    # dict keeps first-seen insertion order of model names
    trials_by_model: dict[str, list[TrialEntity]] = {}
    for trial in trials:
        trials_by_model.setdefault(trial.model_name, []).append(trial)

    summaries: list[ModelSummary] = []
    for model, model_trials in trials_by_model.items():
        summary = _summarize_model(model, model_trials)
        if summary is None:
            logger.debug(f"Model {model} has no completed trials, skipping")
            continue
        summaries.append(summary)

    return summaries


def _summarize_model(model: str, trials: list[TrialEntity]) -> ModelSummary | None:
    """Build the summary of a single model group.

    Returns:
        ModelSummary, or None if the model has no completed trials.
    """
    completed_trials = [t for t in trials if t.is_completed]
    if not completed_trials:
        return None

    status = "RUNNING" if any(t.is_running for t in trials) else "DONE"

    best_trial = completed_trials[0]
    best_score = completed_score(best_trial)
    total_duration = timedelta(0)
    for trial in completed_trials:
        score = completed_score(trial)
        # Strict comparison: the first of equally scored trials keeps the title
        if score > best_score:
            best_trial = trial
            best_score = score
        total_duration += completed_duration(trial)

    return ModelSummary(
        model=model,
        status=status,
        completed_trials=tuple(completed_trials),
        total_duration=total_duration,
        best_trial=best_trial,
    )


def completed_score(trial: TrialEntity) -> float:
    """Get the score of a completed trial.

    Raises:
        MalformedTrialError: If the score is missing, not a real number, or NaN.
    """
    score = trial.score
    # bool is an int subclass but never a valid score; NaN is unordered
    if isinstance(score, bool) or not isinstance(score, (int, float)) or math.isnan(score):
        raise MalformedTrialError(trial.id, f"completed trial has non-numeric score {score!r}")
    return score


def completed_duration(trial: TrialEntity) -> timedelta:
    """Get the duration of a completed trial.

    Raises:
        MalformedTrialError: If the stop time is missing or precedes the start time.
    """
    if trial.datetime_stopped is None:
        raise MalformedTrialError(trial.id, "completed trial has no datetime_stopped")

    # Naive timestamps are UTC, so mixed naive/aware trials still subtract
    duration = as_utc(trial.datetime_stopped) - as_utc(trial.datetime_started)
    if duration < timedelta(0):
        raise MalformedTrialError(trial.id, "datetime_stopped is before datetime_started")
    return duration
