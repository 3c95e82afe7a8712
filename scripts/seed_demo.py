#!/usr/bin/env python3
"""Seed a demo train job with trials.

Creates a train job with trials across several models so the train job
view has model summaries, best-score plots, and a mix of trial states.

Usage:
    python scripts/seed_demo.py

This script:
1. Initializes the demo database
2. Seeds the demo train job
3. Seeds completed, running, and errored trials for three models
"""

from __future__ import annotations

import logging
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from trialboard.db import repo  # noqa: E402
from trialboard.db.session import init_db, session_scope  # noqa: E402
from trialboard.models.domain import (  # noqa: E402
    TRIAL_COMPLETED,
    TRIAL_ERRORED,
    TRIAL_RUNNING,
    TrainJobEntity,
    TrialEntity,
)

# Constants
DEMO_DB_PATH = PROJECT_ROOT / "demo.db"

# Demo identifiers
DEMO_APP = "fashion_mnist_app"
DEMO_APP_VERSION = 1
DEMO_TRAIN_JOB_ID = "demo_train_job"

# Model -> number of completed trials
DEMO_MODELS = {
    "TfFeedForward": 6,
    "SkDt": 4,
    "SkSvm": 0,  # only errored trials, dropped from summaries
}

DEMO_SEED = 42


def build_trials(started_at: datetime) -> list[TrialEntity]:
    """Build demo trials for every demo model."""
    rng = random.Random(DEMO_SEED)
    trials: list[TrialEntity] = []

    for model, completed_count in DEMO_MODELS.items():
        clock = started_at
        for i in range(completed_count):
            duration = timedelta(minutes=rng.randint(2, 40))
            trials.append(
                TrialEntity(
                    id=f"{model.lower()}-{i:02d}",
                    model_name=model,
                    status=TRIAL_COMPLETED,
                    score=round(rng.uniform(0.5, 0.95), 4),
                    datetime_started=clock,
                    datetime_stopped=clock + duration,
                    train_job_id=DEMO_TRAIN_JOB_ID,
                    knobs={"learning_rate": round(rng.uniform(1e-4, 1e-2), 5)},
                )
            )
            clock += duration

        # One trailing trial per model: running for the first, errored otherwise
        trailing_status = TRIAL_RUNNING if model == "TfFeedForward" else TRIAL_ERRORED
        trials.append(
            TrialEntity(
                id=f"{model.lower()}-{completed_count:02d}",
                model_name=model,
                status=trailing_status,
                datetime_started=clock,
                datetime_stopped=None if trailing_status == TRIAL_RUNNING else clock,
                train_job_id=DEMO_TRAIN_JOB_ID,
            )
        )

    return trials


def seed_database() -> None:
    """Seed database with the demo train job and its trials."""
    init_db(DEMO_DB_PATH)

    with session_scope(DEMO_DB_PATH) as session:
        if repo.get_train_job(session, DEMO_APP, DEMO_APP_VERSION) is not None:
            print("Demo train job already seeded, skipping")
            return

        started_at = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(hours=6)
        repo.create_train_job(
            session,
            TrainJobEntity(
                train_job_id=DEMO_TRAIN_JOB_ID,
                app=DEMO_APP,
                app_version=DEMO_APP_VERSION,
                status="RUNNING",
                datetime_started=started_at,
            ),
        )
        print(f"  Created train job: {DEMO_APP} v{DEMO_APP_VERSION}")

        for trial in build_trials(started_at):
            repo.create_trial(session, trial)
            print(f"  Created trial: {trial.id} ({trial.status})")

    print("Database seeded successfully!")


def main() -> int:
    """Main entry point."""
    logging.basicConfig(level=logging.INFO)

    print("=" * 60)
    print("Trialboard Demo Seeding Script")
    print("=" * 60)

    print("\nSeeding database...")
    seed_database()

    print("\n" + "=" * 60)
    print("Demo seeding complete!")
    print(f"Database: {DEMO_DB_PATH}")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
