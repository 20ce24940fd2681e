"""aucpr FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from aucpr.config import get_settings
from aucpr.repositories.duckdb_repo import DuckDBRepo
from aucpr.repositories.storage import StorageBackend
from aucpr.routers import evaluations
from aucpr.services.evaluation import EvaluationService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown.

    On startup:
    - Create DuckDB connection and initialize schema.
    - Create the EvaluationService with its StorageBackend.
    - Store all services on app.state for dependency injection.

    On shutdown:
    - Checkpoint and close the DuckDB connection.
    """
    settings = get_settings()

    # Database
    db = DuckDBRepo(settings.db_path)
    db.initialize_schema()
    app.state.db = db

    # Evaluation service (parsers read sources through its storage backend)
    app.state.evaluation_service = EvaluationService(
        storage=StorageBackend(), settings=settings
    )
    logger.info("aucpr started with database %s", settings.db_path)

    yield

    # Shutdown
    db.connection.execute("CHECKPOINT")
    db.close()


app = FastAPI(
    title="aucpr",
    description="Area under the precision-recall and ROC curves",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(evaluations.router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Serve the API on the configured host and port."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)
