"""In-memory collaborators for demo/testing.

StaticTrialSource serves fixed snapshots; the recording sinks keep every
call so tests and scripts can inspect what would have been rendered.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from trialboard.models.domain import PlotOption, PlotSeries, TrialEntity
from trialboard.providers.base import FetchError, Navigator, PlotSink, TrialSource


class StaticTrialSource(TrialSource):
    """Trial source serving pre-loaded snapshots keyed by (app, app_version).

    A snapshot registered as an exception instance is raised instead of
    returned, which simulates a failing network client.
    """

    def __init__(
        self,
        snapshots: dict[tuple[str, int], list[TrialEntity] | Exception] | None = None,
    ):
        self.snapshots = dict(snapshots or {})
        self.fetch_count = 0

    def set_trials(self, app: str, app_version: int, trials: list[TrialEntity]) -> None:
        """Replace the snapshot served for a train job."""
        self.snapshots[(app, app_version)] = list(trials)

    def set_failure(self, app: str, app_version: int, detail: str = "unavailable") -> None:
        """Make the next fetches of a train job fail."""
        self.snapshots[(app, app_version)] = FetchError(app, app_version, detail)

    def get_trials_of_train_job(self, app: str, app_version: int) -> list[TrialEntity]:
        self.fetch_count += 1
        snapshot = self.snapshots.get((app, app_version))
        if snapshot is None:
            raise FetchError(app, app_version, "train job not found")
        if isinstance(snapshot, Exception):
            raise snapshot
        return list(snapshot)


@dataclass
class PlotUpdate:
    """A single recorded update_plot call."""

    plot_id: str
    series: list[PlotSeries]
    plot_option: PlotOption


class RecordingPlotSink(PlotSink):
    """Plot sink that records updates; the latest update per plot wins."""

    def __init__(self):
        self.updates: list[PlotUpdate] = []

    def update_plot(
        self,
        plot_id: str,
        series: Sequence[PlotSeries],
        plot_option: PlotOption,
    ) -> None:
        self.updates.append(
            PlotUpdate(plot_id=plot_id, series=list(series), plot_option=plot_option)
        )

    @property
    def plots(self) -> dict[str, PlotUpdate]:
        """Latest update per plot ID."""
        return {u.plot_id: u for u in self.updates}


class RecordingNavigator(Navigator):
    """Navigator that records visited links."""

    def __init__(self):
        self.visited: list[str] = []

    def go_to(self, link: str) -> None:
        self.visited.append(link)
