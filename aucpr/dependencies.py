"""FastAPI dependency injection for DuckDB and application services."""

from collections.abc import Generator

import duckdb
from fastapi import Depends, Request

from aucpr.repositories.duckdb_repo import DuckDBRepo
from aucpr.services.evaluation import EvaluationService


def get_db(request: Request) -> DuckDBRepo:
    """Return the application-wide DuckDBRepo stored on app.state."""
    return request.app.state.db


def get_cursor(
    db: DuckDBRepo = Depends(get_db),
) -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """Yield a DuckDB cursor, closing it after the request."""
    cursor = db.connection.cursor()
    try:
        yield cursor
    finally:
        cursor.close()


def get_evaluation_service(request: Request) -> EvaluationService:
    """Return the application-wide EvaluationService stored on app.state."""
    return request.app.state.evaluation_service
