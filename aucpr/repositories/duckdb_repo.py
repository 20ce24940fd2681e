"""DuckDB connection wrapper with schema initialization."""

from pathlib import Path

import duckdb


class DuckDBRepo:
    """Manages a DuckDB connection and schema lifecycle.

    Opens a single persistent connection at startup.  Callers obtain
    cursors via ``connection.cursor()`` for concurrent read access.
    """

    def __init__(self, db_path: str | Path) -> None:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self.connection: duckdb.DuckDBPyConnection = duckdb.connect(str(db_path))

    def initialize_schema(self) -> None:
        """Create the evaluation tables if they do not already exist.

        No PRIMARY KEY or FOREIGN KEY constraints are used; curve points
        are bulk-inserted from DataFrames.
        """
        self.connection.execute("""
            CREATE TABLE IF NOT EXISTS evaluations (
                id              VARCHAR NOT NULL,
                name            VARCHAR NOT NULL,
                source_format   VARCHAR NOT NULL,
                source_paths    VARCHAR[] NOT NULL,
                total_positives DOUBLE,
                total_negatives DOUBLE,
                min_recall      DOUBLE NOT NULL,
                auc_pr          DOUBLE NOT NULL,
                auc_roc         DOUBLE NOT NULL,
                created_at      TIMESTAMP DEFAULT current_timestamp
            )
        """)

        self.connection.execute("""
            CREATE TABLE IF NOT EXISTS curve_points (
                evaluation_id   VARCHAR NOT NULL,
                kind            VARCHAR NOT NULL,
                seq             INTEGER NOT NULL,
                x               DOUBLE NOT NULL,
                y               DOUBLE NOT NULL
            )
        """)

    def close(self) -> None:
        """Close the underlying DuckDB connection."""
        self.connection.close()
