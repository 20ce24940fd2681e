"""aucpr configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """aucpr settings.

    All fields can be overridden via environment variables with
    the AUCPR_ prefix (e.g., AUCPR_DB_PATH).
    """

    db_path: Path = Path("data/aucpr.duckdb")
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    min_recall: float = 0.0
    standard_points: int = 100  # resolution of the .spr export
    average_points: int = 100  # resolution of vertical averaging

    model_config = {
        "env_prefix": "AUCPR_",
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
