"""Pydantic models for the trialboard API."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from trialboard.core.durations import as_utc


class TrialDetail(BaseModel):
    """Trial details for API response."""

    trial_id: str
    train_job_id: str | None
    model_name: str
    status: str
    score: float | None
    knobs: dict | None
    datetime_started: datetime
    datetime_stopped: datetime | None
    duration_seconds: float | None


class TrialRow(BaseModel):
    """One row of the all-trials table."""

    trial_id: str
    model_name: str
    status: str
    score: float | None
    datetime_started: datetime
    datetime_stopped: datetime | None
    started: str  # e.g. "5 minutes ago"
    stopped: str  # "-" while the trial has not stopped
    duration_seconds: float | None
    duration: str  # "-" while the trial has not stopped


class PlotPointDetail(BaseModel):
    """Single point of a plot series."""

    timestamp: datetime
    value: float


class PlotSeriesDetail(BaseModel):
    """Named plot series."""

    name: str
    data: list[PlotPointDetail]


class AxisDetail(BaseModel):
    """Plot axis options."""

    name: str
    type: Literal["time", "value", "category"]


class PlotDetail(BaseModel):
    """Plot payload: identifier, series and options for the chart widget."""

    plot_id: str
    title: str
    x_axis: AxisDetail
    series: list[PlotSeriesDetail]


class ModelSummaryDetail(BaseModel):
    """Per-model performance card."""

    model: str
    status: Literal["RUNNING", "DONE"]
    completed_trial_count: int = Field(ge=1)
    completed_trial_ids: list[str]
    total_duration_seconds: float = Field(ge=0)
    total_duration: str  # humanized, e.g. "3 hours"
    best_trial_id: str
    best_score: float
    plot: PlotDetail


class TrainJobOverview(BaseModel):
    """Full train job view for API response."""

    train_job_id: str
    app: str
    app_version: int
    status: str
    model_summaries: list[ModelSummaryDetail]
    trials: list[TrialRow]


class TrialSubmission(BaseModel):
    """Trial record submitted for a train job."""

    trial_id: str = Field(min_length=1, max_length=64)
    model_name: str = Field(min_length=1, max_length=128)
    status: str = Field(min_length=1, max_length=16)
    score: float | None = Field(default=None, allow_inf_nan=False)
    knobs: dict | None = None
    datetime_started: datetime
    datetime_stopped: datetime | None = None

    @model_validator(mode="after")
    def check_completed_trial(self) -> TrialSubmission:
        """A COMPLETED trial needs a score and a stop time not before its start."""
        if self.status == "COMPLETED":
            if self.score is None:
                raise ValueError("COMPLETED trial requires a score")
            if self.datetime_stopped is None:
                raise ValueError("COMPLETED trial requires datetime_stopped")
        if self.datetime_stopped is not None and as_utc(self.datetime_stopped) < as_utc(
            self.datetime_started
        ):
            raise ValueError("datetime_stopped is before datetime_started")
        return self
