"""Domain models for trialboard.

Pure Python dataclasses representing domain entities.
These models are independent of SQLAlchemy and used throughout
the application for clean separation from the database layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Literal

# ============================================================================
# Train Job Domain
# ============================================================================

TrainJobStatus = Literal["STARTED", "RUNNING", "STOPPED", "ERRORED"]


@dataclass
class TrainJobEntity:
    """Domain model for a train job (a named, versioned set of trials)."""

    train_job_id: str
    app: str
    app_version: int
    status: TrainJobStatus
    datetime_started: datetime
    datetime_stopped: datetime | None = None


# ============================================================================
# Trial Domain
# ============================================================================

# Only RUNNING and COMPLETED carry meaning for aggregation; any other
# status string is "not completed, not running".
TRIAL_RUNNING = "RUNNING"
TRIAL_COMPLETED = "COMPLETED"
TRIAL_ERRORED = "ERRORED"
TRIAL_STOPPED = "STOPPED"

TrialStatus = str


@dataclass(frozen=True)
class TrialEntity:
    """Domain model for a single trial of a train job."""

    id: str
    model_name: str
    status: TrialStatus
    datetime_started: datetime
    score: float | None = None
    datetime_stopped: datetime | None = None
    train_job_id: str | None = None
    knobs: dict | None = field(default=None, compare=False, hash=False)

    @property
    def is_completed(self) -> bool:
        return self.status == TRIAL_COMPLETED

    @property
    def is_running(self) -> bool:
        return self.status == TRIAL_RUNNING


# ============================================================================
# Summary Domain
# ============================================================================

SummaryStatus = Literal["RUNNING", "DONE"]


@dataclass(frozen=True)
class ModelSummary:
    """Per-model performance summary derived from a trial snapshot.

    Attributes:
        model: Model name this summary describes.
        status: 'RUNNING' if any trial of the model is running, else 'DONE'.
        completed_trials: The model's COMPLETED trials, in input order.
        total_duration: Sum of (stop - start) over completed trials.
        best_trial: Completed trial with the highest score (first wins ties).
    """

    model: str
    status: SummaryStatus
    completed_trials: tuple[TrialEntity, ...]
    total_duration: timedelta
    best_trial: TrialEntity

    @property
    def completed_count(self) -> int:
        return len(self.completed_trials)

    @property
    def is_running(self) -> bool:
        return self.status == "RUNNING"


# ============================================================================
# Plot Domain
# ============================================================================


@dataclass(frozen=True)
class PlotPoint:
    """A single (timestamp, value) point of a plot series."""

    timestamp: datetime
    value: float


@dataclass(frozen=True)
class PlotSeries:
    """Named, time-ordered sequence of plot points."""

    name: str
    data: tuple[PlotPoint, ...] = ()


@dataclass(frozen=True)
class AxisOption:
    """Axis configuration handed to the plot sink."""

    name: str
    type: Literal["time", "value", "category"] = "value"


@dataclass(frozen=True)
class PlotOption:
    """Plot-level configuration handed to the plot sink."""

    title: str
    x_axis: AxisOption
