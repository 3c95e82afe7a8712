"""Train job refresh cycle.

- Fetches a full trial snapshot from the trial source
- Recomputes model summaries and pushes one best-score plot per model
- Routes trial selections to the navigator

Refreshes are last-write-wins: every refresh takes a token from
begin_refresh(), and only the most recently issued token may publish.
A fetch failure leaves the previous snapshot in place and never reaches
the summarizer.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass

from trialboard.aggregation.series import get_plot_details, plot_id_for_model
from trialboard.aggregation.summary import summarize_trials
from trialboard.models.domain import ModelSummary, TrialEntity
from trialboard.providers.base import (
    FetchError,
    Navigator,
    PlotSink,
    TrialSource,
    trial_detail_link,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainJobSnapshot:
    """Trials of a train job and the summaries computed from them."""

    app: str
    app_version: int
    trials: tuple[TrialEntity, ...]
    model_summaries: tuple[ModelSummary, ...]
    token: int


class TrainJobRefresher:
    """Keeps the summaries and plots of one train job view up to date."""

    def __init__(self, source: TrialSource, plot_sink: PlotSink, navigator: Navigator):
        self.source = source
        self.plot_sink = plot_sink
        self.navigator = navigator
        self.snapshot: TrainJobSnapshot | None = None
        self._tokens = itertools.count(1)
        self._latest_token = 0

    def begin_refresh(self) -> int:
        """Issue a refresh token. Earlier tokens become stale."""
        self._latest_token = next(self._tokens)
        return self._latest_token

    def refresh(self, app: str, app_version: int) -> TrainJobSnapshot | None:
        """Fetch, summarize and plot the current trials of a train job.

        Returns:
            The new snapshot, or None if a newer refresh was begun meanwhile.

        Raises:
            FetchError: If the trial source fails. The previous snapshot is kept.
            MalformedTrialError: If the snapshot violates the trial invariants.
        """
        token = self.begin_refresh()
        try:
            trials = self.source.get_trials_of_train_job(app, app_version)
        except FetchError as e:
            logger.warning(f"Refresh {token} failed: {e}")
            raise
        return self.apply(token, app, app_version, trials)

    def apply(
        self,
        token: int,
        app: str,
        app_version: int,
        trials: list[TrialEntity],
    ) -> TrainJobSnapshot | None:
        """Publish a fetched snapshot if its refresh is still the latest.

        Args:
            token: Token from begin_refresh() for the fetch that produced trials.
            app: Train job name.
            app_version: Train job version.
            trials: Complete trial snapshot.

        Returns:
            The published snapshot, or None if token is stale.
        """
        if token != self._latest_token:
            logger.warning(f"Discarding stale refresh {token} (latest is {self._latest_token})")
            return None

        summaries = summarize_trials(trials)
        snapshot = TrainJobSnapshot(
            app=app,
            app_version=app_version,
            trials=tuple(trials),
            model_summaries=tuple(summaries),
            token=token,
        )
        self.snapshot = snapshot
        self._update_plots(summaries)

        logger.info(
            f"Refreshed {app} v{app_version}: "
            f"{len(trials)} trials, {len(summaries)} model summaries"
        )
        return snapshot

    def _update_plots(self, summaries: list[ModelSummary]) -> None:
        for summary in summaries:
            series, plot_option = get_plot_details(summary.completed_trials)
            self.plot_sink.update_plot(plot_id_for_model(summary.model), series, plot_option)

    def go_to_trial(self, trial_id: str) -> None:
        """Open the detail view of a trial."""
        self.navigator.go_to(trial_detail_link(trial_id))

    def go_to_best_trial(self, model: str) -> None:
        """Open the detail view of a model's best trial.

        Raises:
            LookupError: If the current snapshot has no summary for model.
        """
        summaries = self.snapshot.model_summaries if self.snapshot else ()
        for summary in summaries:
            if summary.model == model:
                self.go_to_trial(summary.best_trial.id)
                return
        raise LookupError(f"No summary for model: {model}")
