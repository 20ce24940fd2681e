"""Evaluation API router.

Endpoints:
- POST /evaluations                         -- evaluate one point source
- POST /evaluations/average                 -- vertically average several list sources
- GET  /evaluations                         -- list stored evaluations
- GET  /evaluations/{evaluation_id}         -- one stored evaluation
- GET  /evaluations/{evaluation_id}/curves/{kind} -- points of a stored curve
"""

from __future__ import annotations

import duckdb
from fastapi import APIRouter, Depends, HTTPException

from aucpr.dependencies import get_cursor, get_evaluation_service
from aucpr.exceptions import (
    CollectionStateError,
    EmptyInputError,
    MissingTotalsError,
    SourceUnreadableError,
)
from aucpr.models.evaluation import (
    AverageRequest,
    AverageResponse,
    CurveResponse,
    EvaluateRequest,
    EvaluationSummary,
    MemberScore,
)
from aucpr.services.evaluation import CURVE_KINDS, EvaluationResult, EvaluationService
from aucpr.services.evaluation_store import (
    get_curve,
    get_evaluation,
    list_evaluations,
    save_evaluation,
)

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


def _run(compute) -> EvaluationResult:
    """Run *compute* and translate domain errors into HTTP errors."""
    try:
        return compute()
    except (SourceUnreadableError, MissingTotalsError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (EmptyInputError, CollectionStateError) as e:
        raise HTTPException(status_code=422, detail=str(e))


def _store(cursor: duckdb.DuckDBPyConnection, result: EvaluationResult) -> EvaluationSummary:
    evaluation_id = save_evaluation(cursor, result)
    summary = get_evaluation(cursor, evaluation_id)
    assert summary is not None
    return summary


@router.post("", response_model=EvaluationSummary)
def create_evaluation(
    request: EvaluateRequest,
    cursor: duckdb.DuckDBPyConnection = Depends(get_cursor),
    service: EvaluationService = Depends(get_evaluation_service),
) -> EvaluationSummary:
    """Evaluate a ``list``, ``pr`` or ``roc`` source and store the result.

    ``pr`` and ``roc`` sources require ``pos_count`` and ``neg_count``.
    """
    result = _run(
        lambda: service.evaluate_source(
            request.source_path,
            request.format,
            pos_count=request.pos_count,
            neg_count=request.neg_count,
            min_recall=request.min_recall,
            name=request.name,
        )
    )
    return _store(cursor, result)


@router.post("/average", response_model=AverageResponse)
def create_average(
    request: AverageRequest,
    cursor: duckdb.DuckDBPyConnection = Depends(get_cursor),
    service: EvaluationService = Depends(get_evaluation_service),
) -> AverageResponse:
    """Vertically average the PR and ROC curves of several ``list`` sources."""
    result = _run(
        lambda: service.evaluate_average(
            request.source_paths,
            min_recall=request.min_recall,
            num=request.points,
            name=request.name,
        )
    )
    summary = _store(cursor, result)
    return AverageResponse(
        evaluation=summary,
        members=[
            MemberScore(
                name=m.name,
                source_path=m.source_paths[0],
                auc_pr=m.auc_pr,
                auc_roc=m.auc_roc,
            )
            for m in result.members
        ],
    )


@router.get("", response_model=list[EvaluationSummary])
def get_evaluations(
    cursor: duckdb.DuckDBPyConnection = Depends(get_cursor),
) -> list[EvaluationSummary]:
    """List stored evaluations, newest first."""
    return list_evaluations(cursor)


@router.get("/{evaluation_id}", response_model=EvaluationSummary)
def get_evaluation_by_id(
    evaluation_id: str,
    cursor: duckdb.DuckDBPyConnection = Depends(get_cursor),
) -> EvaluationSummary:
    """Return one stored evaluation."""
    summary = get_evaluation(cursor, evaluation_id)
    if summary is None:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    return summary


@router.get("/{evaluation_id}/curves/{kind}", response_model=CurveResponse)
def get_evaluation_curve(
    evaluation_id: str,
    kind: str,
    cursor: duckdb.DuckDBPyConnection = Depends(get_cursor),
) -> CurveResponse:
    """Return the points of a stored ``pr``, ``spr``, ``roc`` or ``opr`` curve."""
    if kind not in CURVE_KINDS:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown curve kind '{kind}'; expected one of {', '.join(CURVE_KINDS)}",
        )
    if get_evaluation(cursor, evaluation_id) is None:
        raise HTTPException(status_code=404, detail="Evaluation not found")

    curve = get_curve(cursor, evaluation_id, kind)
    if curve is None:
        raise HTTPException(
            status_code=404,
            detail=f"No '{kind}' curve stored for this evaluation",
        )
    return curve
