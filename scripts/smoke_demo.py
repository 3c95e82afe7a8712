#!/usr/bin/env python3
"""Smoke test for the demo train job.

Validates that the demo train job was seeded and that a full refresh
cycle (fetch -> summarize -> plot) produces the expected summaries.

Usage:
    python scripts/smoke_demo.py

Exit codes:
    0: All checks passed
    1: Some checks failed
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from trialboard.aggregation.summary import summarize_train_job  # noqa: E402
from trialboard.core.durations import humanize_duration  # noqa: E402
from trialboard.db.session import get_session  # noqa: E402
from trialboard.providers.db import DbTrialSource  # noqa: E402
from trialboard.providers.mock import RecordingNavigator, RecordingPlotSink  # noqa: E402
from trialboard.worker.refresher import TrainJobRefresher  # noqa: E402

# Constants
DEMO_DB_PATH = PROJECT_ROOT / "demo.db"
DEMO_APP = "fashion_mnist_app"
DEMO_APP_VERSION = 1
EXPECTED_MODELS = ["TfFeedForward", "SkDt"]


def check_database_exists() -> bool:
    """Check that demo database exists."""
    if not DEMO_DB_PATH.exists():
        print(f"FAIL: Demo database not found: {DEMO_DB_PATH}")
        return False
    print(f"OK: Database exists: {DEMO_DB_PATH}")
    return True


def check_summaries() -> bool:
    """Check that the demo train job summarizes to the expected models."""
    session = get_session(DEMO_DB_PATH)
    try:
        summaries = summarize_train_job(session, DEMO_APP, DEMO_APP_VERSION)
    except LookupError as e:
        print(f"FAIL: {e}")
        return False
    finally:
        session.close()

    models = [s.model for s in summaries]
    if models != EXPECTED_MODELS:
        print(f"FAIL: Expected models {EXPECTED_MODELS}, got {models}")
        return False

    print(f"OK: Found {len(summaries)} model summaries")
    for summary in summaries:
        print(
            f"    {summary.model}: {summary.status}, {summary.completed_count} completed "
            f"over {humanize_duration(summary.total_duration)}, "
            f"best {summary.best_trial.id} ({summary.best_trial.score})"
        )
    return True


def check_refresh_cycle() -> bool:
    """Check that a refresh pushes one monotonic plot per model."""
    plot_sink = RecordingPlotSink()
    refresher = TrainJobRefresher(
        source=DbTrialSource(DEMO_DB_PATH),
        plot_sink=plot_sink,
        navigator=RecordingNavigator(),
    )
    refresher.refresh(DEMO_APP, DEMO_APP_VERSION)

    expected_ids = {f"plot-{m}" for m in EXPECTED_MODELS}
    if set(plot_sink.plots) != expected_ids:
        print(f"FAIL: Expected plots {sorted(expected_ids)}, got {sorted(plot_sink.plots)}")
        return False

    all_ok = True
    for plot_id, update in plot_sink.plots.items():
        values = [p.value for p in update.series[0].data]
        if values != sorted(values):
            print(f"    FAIL: {plot_id} is not monotonic: {values}")
            all_ok = False
        else:
            print(f"    OK: {plot_id} - {len(values)} points, best {values[-1]}")

    return all_ok


def main() -> int:
    """Main entry point."""
    logging.basicConfig(level=logging.INFO)

    print("=" * 60)
    print("Trialboard Demo Smoke Test")
    print("=" * 60)

    if not check_database_exists():
        return 1

    checks = [check_summaries(), check_refresh_cycle()]

    print("\n" + "=" * 60)
    if all(checks):
        print("All checks passed!")
        print("=" * 60)
        return 0

    print("Some checks failed")
    print("=" * 60)
    return 1


if __name__ == "__main__":
    sys.exit(main())
