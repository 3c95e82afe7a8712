"""FastAPI application factory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trialboard.db.repo import DbSession
from trialboard.db.session import get_session

CORS_ORIGINS_ENV = "TRIALBOARD_CORS_ORIGINS"
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",  # UI dev server
    "http://127.0.0.1:3000",
]


def get_db_session(request: Request) -> Generator[DbSession, None, None]:
    """Dependency to get database session for the app's configured database.

    Yields:
        Database session that is automatically closed after request.
    """
    session = get_session(request.app.state.db_path)
    try:
        yield session
    finally:
        session.close()


def _cors_origins() -> list[str]:
    raw = os.environ.get(CORS_ORIGINS_ENV)
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 without echoing raw inputs.

    Rejected inputs may be NaN or Infinity, which are not valid JSON.
    """
    errors = [
        {key: value for key, value in error.items() if key not in ("input", "ctx")}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        db_path: Optional path to database file. Falls back to
            TRIALBOARD_DB_PATH, then data/trialboard.db.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="Trialboard API",
        description="Train job trials and per-model performance summaries",
        version="0.1.0",
    )
    app.state.db_path = db_path
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from trialboard.api.routes import train_jobs, trials

    app.include_router(train_jobs.router, prefix="/api")
    app.include_router(trials.router, prefix="/api")

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Default app instance
app = create_app()
