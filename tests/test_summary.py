"""Tests for per-model trial summaries."""

from datetime import timedelta, timezone

import pytest

from trialboard.aggregation.summary import (
    MalformedTrialError,
    summarize_train_job,
    summarize_trials,
)
from trialboard.db import repo
from trialboard.models.domain import TrainJobEntity, TrialEntity

from conftest import T0


class TestGrouping:
    """Trials are grouped by model name."""

    def test_empty_snapshot_has_no_summaries(self):
        """No trials produce no summaries."""
        assert summarize_trials([]) == []

    def test_every_completed_trial_lands_in_its_model(self, make_trial):
        """Each completed trial appears once, under its own model."""
        trials = [
            make_trial("a1", model_name="A", score=1, start=0, stop=1),
            make_trial("b1", model_name="B", score=2, start=0, stop=1),
            make_trial("a2", model_name="A", score=3, start=2, stop=3),
            make_trial("b2", model_name="B", status="ERRORED", start=2, stop=3),
        ]

        summaries = summarize_trials(trials)

        by_model = {s.model: [t.id for t in s.completed_trials] for s in summaries}
        assert by_model == {"A": ["a1", "a2"], "B": ["b1"]}

    def test_summaries_follow_first_seen_model_order(self, make_trial):
        """Output order is the order models first appear in the input."""
        trials = [
            make_trial("z1", model_name="Zeta", score=1, start=0, stop=1),
            make_trial("a1", model_name="Alpha", score=1, start=0, stop=1),
            make_trial("z2", model_name="Zeta", score=1, start=1, stop=2),
        ]

        assert [s.model for s in summarize_trials(trials)] == ["Zeta", "Alpha"]

    def test_accepts_any_iterable(self, make_trial):
        """A generator snapshot is consumed like a list."""
        trials = (make_trial(f"t{i}", score=i, start=i, stop=i + 1) for i in range(3))

        summaries = summarize_trials(trials)

        assert summaries[0].completed_count == 3


class TestDropEmptyModels:
    """Models without completed trials produce no summary."""

    def test_model_with_only_running_trials_is_dropped(self, make_trial):
        """Running trials alone do not produce a summary."""
        trials = [
            make_trial("r1", model_name="Running", status="RUNNING", start=0),
            make_trial("c1", model_name="Done", score=1, start=0, stop=1),
        ]

        assert [s.model for s in summarize_trials(trials)] == ["Done"]

    def test_model_with_only_failed_trials_is_dropped(self, make_trial):
        """Errored and stopped trials alone do not produce a summary."""
        trials = [
            make_trial("e1", status="ERRORED", start=0, stop=1),
            make_trial("s1", status="STOPPED", start=1, stop=2),
        ]

        assert summarize_trials(trials) == []


class TestStatus:
    """Summary status derivation."""

    def test_running_trial_makes_model_running(self, make_trial):
        """[RUNNING, COMPLETED] yields RUNNING."""
        trials = [
            make_trial("r", status="RUNNING", start=0),
            make_trial("c", score=1, start=0, stop=1),
        ]

        summary = summarize_trials(trials)[0]
        assert summary.status == "RUNNING"
        assert summary.is_running

    def test_no_running_trial_makes_model_done(self, make_trial):
        """[COMPLETED, ERRORED] yields DONE."""
        trials = [
            make_trial("c", score=1, start=0, stop=1),
            make_trial("e", status="ERRORED", start=1, stop=2),
        ]

        summary = summarize_trials(trials)[0]
        assert summary.status == "DONE"
        assert not summary.is_running

    def test_unknown_status_is_neither_running_nor_completed(self, make_trial):
        """Statuses outside RUNNING/COMPLETED count for neither."""
        trials = [
            make_trial("c", score=1, start=0, stop=1),
            make_trial("p", status="PENDING", score=9, start=1),
        ]

        summary = summarize_trials(trials)[0]
        assert summary.status == "DONE"
        assert [t.id for t in summary.completed_trials] == ["c"]


class TestBestTrial:
    """Best trial selection."""

    def test_highest_score_wins(self, make_trial):
        """The completed trial with the highest score is best."""
        trials = [
            make_trial("low", score=0.2, start=0, stop=1),
            make_trial("high", score=0.9, start=1, stop=2),
            make_trial("mid", score=0.5, start=2, stop=3),
        ]

        assert summarize_trials(trials)[0].best_trial.id == "high"

    def test_first_of_tied_trials_wins(self, make_trial):
        """[(A, 5), (B, 5)] keeps A as best."""
        trials = [
            make_trial("A", score=5, start=0, stop=1),
            make_trial("B", score=5, start=1, stop=2),
        ]

        assert summarize_trials(trials)[0].best_trial.id == "A"

    def test_negative_scores_still_pick_a_best_trial(self, make_trial):
        """All-negative scores still select the maximum."""
        trials = [
            make_trial("a", score=-3, start=0, stop=1),
            make_trial("b", score=-1, start=1, stop=2),
        ]

        assert summarize_trials(trials)[0].best_trial.id == "b"

    def test_running_trial_score_is_ignored(self, make_trial):
        """Only completed trials compete for best trial."""
        trials = [
            make_trial("c", score=1, start=0, stop=1),
            make_trial("r", status="RUNNING", score=100, start=1),
        ]

        assert summarize_trials(trials)[0].best_trial.id == "c"


class TestTotalDuration:
    """Cumulative duration of completed trials."""

    def test_duration_is_sum_of_completed_trials(self, make_trial):
        """[(0, 10), (20, 25)] sums to 15 seconds."""
        trials = [
            make_trial("a", score=1, start=0, stop=10),
            make_trial("b", score=1, start=20, stop=25),
        ]

        assert summarize_trials(trials)[0].total_duration == timedelta(seconds=15)

    def test_zero_length_trial_contributes_zero(self, make_trial):
        """A trial that stops when it starts adds nothing."""
        trials = [make_trial("a", score=1, start=5, stop=5)]

        assert summarize_trials(trials)[0].total_duration == timedelta(0)

    def test_non_completed_trials_do_not_count(self, make_trial):
        """Errored trial time is excluded."""
        trials = [
            make_trial("a", score=1, start=0, stop=10),
            make_trial("e", status="ERRORED", start=10, stop=1000),
        ]

        assert summarize_trials(trials)[0].total_duration == timedelta(seconds=10)


class TestMalformedTrials:
    """Invariant violations are reported, never coerced."""

    def test_completed_trial_without_stop_time(self, make_trial):
        """COMPLETED with no datetime_stopped raises."""
        trials = [make_trial("bad", score=1, start=0, stop=None)]

        with pytest.raises(MalformedTrialError) as exc_info:
            summarize_trials(trials)
        assert exc_info.value.trial_id == "bad"

    def test_stop_before_start(self, make_trial):
        """datetime_stopped < datetime_started raises."""
        trials = [make_trial("bad", score=1, start=10, stop=5)]

        with pytest.raises(MalformedTrialError, match="before"):
            summarize_trials(trials)

    def test_completed_trial_without_score(self, make_trial):
        """COMPLETED with no score raises."""
        trials = [make_trial("bad", score=None, start=0, stop=1)]

        with pytest.raises(MalformedTrialError, match="score"):
            summarize_trials(trials)

    def test_one_bad_model_fails_whole_call(self, make_trial):
        """No partial summary list when one model is malformed."""
        trials = [
            make_trial("ok", model_name="Good", score=1, start=0, stop=1),
            make_trial("bad", model_name="Bad", score=1, start=0, stop=None),
        ]

        with pytest.raises(MalformedTrialError):
            summarize_trials(trials)

    def test_nan_score_is_malformed(self, make_trial):
        """NaN cannot be ranked, so it never becomes or blocks the best trial."""
        trials = [
            make_trial("nan", score=float("nan"), start=0, stop=1),
            make_trial("five", score=5, start=1, stop=2),
        ]

        with pytest.raises(MalformedTrialError) as exc_info:
            summarize_trials(trials)
        assert exc_info.value.trial_id == "nan"

    def test_mixed_naive_and_aware_timestamps(self):
        """A naive start and an aware stop are both read as UTC."""
        trial = TrialEntity(
            id="mixed",
            model_name="M",
            status="COMPLETED",
            score=1,
            datetime_started=T0,
            datetime_stopped=T0.replace(tzinfo=timezone.utc) + timedelta(seconds=30),
        )

        assert summarize_trials([trial])[0].total_duration == timedelta(seconds=30)

    def test_is_a_value_error(self):
        """Callers catching ValueError also catch malformed trials."""
        assert issubclass(MalformedTrialError, ValueError)

    def test_running_trial_without_stop_time_is_fine(self, make_trial):
        """Only completed trials need a stop time."""
        trials = [
            make_trial("c", score=1, start=0, stop=1),
            make_trial("r", status="RUNNING", start=2, stop=None),
        ]

        assert len(summarize_trials(trials)) == 1


class TestEndToEnd:
    """Full scenario over one model."""

    def test_running_model_with_two_completed_trials(self, make_trial):
        """Two completed trials and one running trial."""
        first = make_trial("t1", score=3, start=0, stop=1)
        second = make_trial("t2", score=7, start=2, stop=4)
        running = make_trial("t3", status="RUNNING", start=5)

        summaries = summarize_trials([first, second, running])

        assert len(summaries) == 1
        summary = summaries[0]
        assert summary.model == "M"
        assert summary.status == "RUNNING"
        assert summary.completed_trials == (first, second)
        assert summary.completed_count == 2
        assert summary.total_duration == timedelta(seconds=3)
        assert summary.best_trial == second


class TestSummarizeTrainJob:
    """Database-backed summaries."""

    def test_summarizes_stored_trials(self, session, make_trial):
        """Trials of the stored train job are summarized."""
        repo.create_train_job(
            session,
            TrainJobEntity(
                train_job_id="job-1",
                app="app",
                app_version=1,
                status="RUNNING",
                datetime_started=T0,
            ),
        )
        repo.create_trial(
            session, make_trial("t1", score=0.5, start=0, stop=60, train_job_id="job-1")
        )
        repo.create_trial(
            session, make_trial("t2", score=0.8, start=60, stop=90, train_job_id="job-1")
        )
        session.commit()

        summaries = summarize_train_job(session, "app", 1)

        assert len(summaries) == 1
        assert summaries[0].best_trial.id == "t2"
        assert summaries[0].total_duration == timedelta(seconds=90)

    def test_missing_train_job_raises(self, session):
        """Unknown (app, app_version) raises LookupError."""
        with pytest.raises(LookupError):
            summarize_train_job(session, "missing", 1)
