"""Best-score-over-time series for model plots.

Turns a model's completed trials into a monotonic "best score so far"
series keyed by trial start time, plus the plot options the plot sink
expects.
"""

from __future__ import annotations

from collections.abc import Iterable

from trialboard.aggregation.summary import completed_score
from trialboard.core.durations import as_utc
from trialboard.models.domain import (
    AxisOption,
    PlotOption,
    PlotPoint,
    PlotSeries,
    TrialEntity,
)

SERIES_NAME = "Score"
PLOT_TITLE = "Best trial score over time"
PLOT_ID_PREFIX = "plot-"

# Running maximum starts here, so negative scores plot as 0
INITIAL_BEST_SCORE = 0


def plot_id_for_model(model: str) -> str:
    """Get the plot identifier for a model summary."""
    return f"{PLOT_ID_PREFIX}{model}"


def build_best_score_series(completed_trials: Iterable[TrialEntity]) -> PlotSeries:
    """Build the cumulative best-score series of a model.

    Trials are ordered by start time (stable, so equal start times keep
    input order). Each trial contributes exactly one point, stamped with
    its start time and carrying the best score seen up to and including it.

    Args:
        completed_trials: Completed trials of a single model.

    Returns:
        PlotSeries named 'Score', ascending in time and non-decreasing in value.

    Raises:
        MalformedTrialError: If a trial has a non-numeric score.
    """
    trials_over_time = sorted(completed_trials, key=lambda t: as_utc(t.datetime_started))

    best_score = INITIAL_BEST_SCORE
    points: list[PlotPoint] = []
    for trial in trials_over_time:
        best_score = max(completed_score(trial), best_score)
        points.append(PlotPoint(timestamp=trial.datetime_started, value=best_score))

    return PlotSeries(name=SERIES_NAME, data=tuple(points))


def get_plot_details(
    completed_trials: Iterable[TrialEntity],
) -> tuple[list[PlotSeries], PlotOption]:
    """Get series and plot options for a model's best-score plot.

    Args:
        completed_trials: Completed trials of a single model.

    Returns:
        Tuple of ([score series], plot option with a time x-axis).
    """
    series = build_best_score_series(completed_trials)
    plot_option = PlotOption(
        title=PLOT_TITLE,
        x_axis=AxisOption(name="Time", type="time"),
    )
    return [series], plot_option
