"""Collaborator interfaces for the train job view.

The aggregation core never talks to these directly. Callers use them to:
- Trial source: fetch the full trial snapshot of a train job
- Plot sink: render one best-score plot per model summary
- Navigator: open the detail view of a trial

Forbidden: summary logic, series building
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from trialboard.models.domain import PlotOption, PlotSeries, TrialEntity

TRIAL_DETAIL_ROUTE = "/trials/:trialId"


def trial_detail_link(trial_id: str) -> str:
    """Get the navigation link of a trial's detail view."""
    return TRIAL_DETAIL_ROUTE.replace(":trialId", trial_id)


class FetchError(Exception):
    """Raised when a trial source cannot deliver a complete snapshot."""

    def __init__(self, app: str, app_version: int, detail: str):
        self.app = app
        self.app_version = app_version
        self.detail = detail
        super().__init__(f"Failed to retrieve trials for train job {app} v{app_version}: {detail}")


class TrialSource(ABC):
    """Supplies the trials of a train job."""

    @abstractmethod
    def get_trials_of_train_job(self, app: str, app_version: int) -> list[TrialEntity]:
        """Fetch every trial of a train job.

        Args:
            app: Train job name.
            app_version: Train job version.

        Returns:
            Complete trial snapshot.

        Raises:
            FetchError: If the snapshot cannot be fetched in full.
        """
        pass


class PlotSink(ABC):
    """Renders plot series."""

    @abstractmethod
    def update_plot(
        self,
        plot_id: str,
        series: Sequence[PlotSeries],
        plot_option: PlotOption,
    ) -> None:
        """Create or replace the plot identified by plot_id."""
        pass


class Navigator(ABC):
    """Moves the user to another view."""

    @abstractmethod
    def go_to(self, link: str) -> None:
        """Navigate to link."""
        pass
