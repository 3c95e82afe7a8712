"""Trial source backed by the local trial database."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from trialboard.db import repo
from trialboard.db.session import get_session
from trialboard.models.domain import TrialEntity
from trialboard.providers.base import FetchError, TrialSource

logger = logging.getLogger(__name__)


class DbTrialSource(TrialSource):
    """Reads trial snapshots from the database.

    Each fetch uses its own session so a snapshot is read in one pass.
    """

    def __init__(self, db_path: Path | str | None = None):
        """Initialize source.

        Args:
            db_path: Optional path to database file.
        """
        self.db_path = db_path

    def get_trials_of_train_job(self, app: str, app_version: int) -> list[TrialEntity]:
        session = get_session(self.db_path)
        try:
            train_job = repo.get_train_job(session, app, app_version)
            if train_job is None:
                raise FetchError(app, app_version, "train job not found")
            trials = repo.get_trials_for_train_job(session, train_job.train_job_id)
        except SQLAlchemyError as e:
            raise FetchError(app, app_version, str(e)) from e
        finally:
            session.close()

        logger.debug(f"Fetched {len(trials)} trials for {app} v{app_version}")
        return trials
