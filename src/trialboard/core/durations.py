"""Duration helpers for trial timing.

Stop times are optional, so every helper here is total over a missing
stop time instead of relying on truthiness (a zero-length trial is a
real duration, not an absent one).

Humanized text uses fixed relative-time thresholds (45 seconds,
45 minutes, 22 hours, 26 days, 11 months) so phrases are stable
across the trials table and model summaries.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

from trialboard.models.domain import TrialEntity

# Relative-time thresholds
SECONDS_THRESHOLD = 45
MINUTES_THRESHOLD = 45
HOURS_THRESHOLD = 22
DAYS_THRESHOLD = 26
MONTHS_THRESHOLD = 11

DAYS_PER_MONTH = 30.436875
DAYS_PER_YEAR = 365.2425

NOT_STOPPED = "-"


def trial_duration(trial: TrialEntity) -> timedelta | None:
    """Get elapsed time of a trial.

    Args:
        trial: Trial to measure.

    Returns:
        datetime_stopped - datetime_started, or None if the trial has not stopped.
    """
    if trial.datetime_stopped is None:
        return None
    return trial.datetime_stopped - trial.datetime_started


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; thresholds assume half-up
    return math.floor(value + 0.5)


def humanize_duration(delta: timedelta) -> str:
    """Render a duration as approximate human text ("5 minutes", "a day").

    Sign is ignored; use humanize_since() for relative phrasing.
    """
    total = abs(delta.total_seconds())
    seconds = _round_half_up(total)
    minutes = _round_half_up(total / 60)
    hours = _round_half_up(total / 3600)
    days = _round_half_up(total / 86400)
    months = _round_half_up(total / 86400 / DAYS_PER_MONTH)
    years = _round_half_up(total / 86400 / DAYS_PER_YEAR)

    if seconds < SECONDS_THRESHOLD:
        return "a few seconds"
    if minutes <= 1:
        return "a minute"
    if minutes < MINUTES_THRESHOLD:
        return f"{minutes} minutes"
    if hours <= 1:
        return "an hour"
    if hours < HOURS_THRESHOLD:
        return f"{hours} hours"
    if days <= 1:
        return "a day"
    if days < DAYS_THRESHOLD:
        return f"{days} days"
    if months <= 1:
        return "a month"
    if months < MONTHS_THRESHOLD:
        return f"{months} months"
    if years <= 1:
        return "a year"
    return f"{years} years"


def as_utc(value: datetime) -> datetime:
    """Get an aware UTC datetime. Naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_naive_utc(value: datetime) -> datetime:
    """Get a naive UTC datetime, the form timestamps are stored in (SQLite drops tzinfo)."""
    return as_utc(value).astimezone(timezone.utc).replace(tzinfo=None)


def humanize_since(moment: datetime, now: datetime) -> str:
    """Render a timestamp relative to now ("5 minutes ago", "in an hour")."""
    delta = as_utc(now) - as_utc(moment)
    text = humanize_duration(delta)
    if delta < timedelta(0):
        return f"in {text}"
    return f"{text} ago"


def humanize_trial_duration(trial: TrialEntity) -> str:
    """Humanized trial duration, or '-' if the trial has not stopped."""
    duration = trial_duration(trial)
    if duration is None:
        return NOT_STOPPED
    return humanize_duration(duration)
