"""Shared pytest fixtures for aucpr tests."""

from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI

from aucpr.config import Settings
from aucpr.repositories.duckdb_repo import DuckDBRepo
from aucpr.repositories.storage import StorageBackend
from aucpr.routers import evaluations
from aucpr.services.evaluation import EvaluationService

# Four positives scored above four negatives.
PERFECT_LIST = """\
0.9 1
0.8 1
0.7 true
0.6 1
0.4 0
0.3 0
0.2 false
0.1 0
"""

# Every negative scored above every positive.
INVERTED_LIST = """\
0.9 0
0.8 0
0.7 0
0.6 0
0.4 1
0.3 1
0.2 1
0.1 1
"""


@pytest.fixture()
def tmp_db_path(tmp_path: Path) -> Path:
    """Return a temporary DuckDB file path."""
    return tmp_path / "test.duckdb"


@pytest.fixture()
def db(tmp_db_path: Path) -> DuckDBRepo:
    """Create a DuckDBRepo with a temporary database, initialize schema, then close."""
    repo = DuckDBRepo(tmp_db_path)
    repo.initialize_schema()
    yield repo
    repo.close()


@pytest.fixture()
def settings(tmp_db_path: Path) -> Settings:
    return Settings(db_path=tmp_db_path)


@pytest.fixture()
def service(settings: Settings) -> EvaluationService:
    return EvaluationService(storage=StorageBackend(), settings=settings)


@pytest.fixture()
def write_source(tmp_path: Path):
    """Return a helper that writes *content* to ``tmp_path/name`` and returns the path."""

    def _write(name: str, content: str) -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture()
def perfect_list(write_source) -> str:
    return write_source("perfect.txt", PERFECT_LIST)


@pytest.fixture()
def inverted_list(write_source) -> str:
    return write_source("inverted.txt", INVERTED_LIST)


@pytest.fixture()
async def app_client(db: DuckDBRepo, service: EvaluationService) -> httpx.AsyncClient:
    """Create a FastAPI test app with the test DB and yield an async HTTP client."""

    test_app = FastAPI()

    @test_app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    test_app.include_router(evaluations.router)
    test_app.state.db = db
    test_app.state.evaluation_service = service

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=test_app),
        base_url="http://testserver",
    ) as client:
        yield client
