"""Persistence of evaluation results in DuckDB.

Summaries go to the ``evaluations`` table; every curve point goes to
``curve_points`` keyed by evaluation id, curve kind and position.
"""

from __future__ import annotations

import uuid

import pandas as pd
from duckdb import DuckDBPyConnection

from aucpr.models.evaluation import CurvePoint, CurveResponse, EvaluationSummary
from aucpr.services.evaluation import EvaluationResult

_SUMMARY_COLUMNS = (
    "id, name, source_format, source_paths, total_positives, total_negatives, "
    "min_recall, auc_pr, auc_roc, created_at"
)


def save_evaluation(cursor: DuckDBPyConnection, result: EvaluationResult) -> str:
    """Insert *result* and all of its curves; return the new evaluation id."""
    evaluation_id = str(uuid.uuid4())
    cursor.execute(
        "INSERT INTO evaluations "
        "(id, name, source_format, source_paths, total_positives, total_negatives, "
        "min_recall, auc_pr, auc_roc) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
        [
            evaluation_id,
            result.name,
            result.source_format,
            result.source_paths,
            result.total_positives,
            result.total_negatives,
            result.min_recall,
            result.auc_pr,
            result.auc_roc,
        ],
    )

    records = [
        {"evaluation_id": evaluation_id, "kind": kind, "seq": seq, "x": x, "y": y}
        for kind, rows in result.curve_rows().items()
        for seq, (x, y) in enumerate(rows)
    ]
    points_df = pd.DataFrame(
        records, columns=["evaluation_id", "kind", "seq", "x", "y"]
    )
    cursor.execute("INSERT INTO curve_points SELECT * FROM points_df")
    return evaluation_id


def get_evaluation(
    cursor: DuckDBPyConnection, evaluation_id: str
) -> EvaluationSummary | None:
    """Return the stored summary for *evaluation_id*, or ``None``."""
    row = cursor.execute(
        f"SELECT {_SUMMARY_COLUMNS} FROM evaluations WHERE id = ?", [evaluation_id]
    ).fetchone()
    if row is None:
        return None
    return _summary_from_row(cursor, row)


def list_evaluations(cursor: DuckDBPyConnection) -> list[EvaluationSummary]:
    """Return all stored summaries, newest first."""
    rows = cursor.execute(
        f"SELECT {_SUMMARY_COLUMNS} FROM evaluations ORDER BY created_at DESC"
    ).fetchall()
    return [_summary_from_row(cursor, row) for row in rows]


def get_curve(
    cursor: DuckDBPyConnection, evaluation_id: str, kind: str
) -> CurveResponse | None:
    """Return the stored *kind* curve of an evaluation, or ``None`` if absent."""
    rows = cursor.execute(
        "SELECT x, y FROM curve_points WHERE evaluation_id = ? AND kind = ? "
        "ORDER BY seq",
        [evaluation_id, kind],
    ).fetchall()
    if not rows:
        return None
    return CurveResponse(
        evaluation_id=evaluation_id,
        kind=kind,
        points=[CurvePoint(x=x, y=y) for x, y in rows],
    )


def _summary_from_row(cursor: DuckDBPyConnection, row: tuple) -> EvaluationSummary:
    kinds = cursor.execute(
        "SELECT DISTINCT kind FROM curve_points WHERE evaluation_id = ? ORDER BY kind",
        [row[0]],
    ).fetchall()
    return EvaluationSummary(
        id=row[0],
        name=row[1],
        source_format=row[2],
        source_paths=list(row[3]),
        total_positives=row[4],
        total_negatives=row[5],
        min_recall=row[6],
        auc_pr=row[7],
        auc_roc=row[8],
        created_at=row[9],
        curve_kinds=[k[0] for k in kinds],
    )
