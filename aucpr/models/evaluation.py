"""Request and response models for the evaluation endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class EvaluateRequest(BaseModel):
    """Body for POST /evaluations."""

    source_path: str
    format: Literal["list", "pr", "roc"] = "list"
    pos_count: float | None = Field(None, gt=0)
    neg_count: float | None = Field(None, gt=0)
    min_recall: float | None = Field(None, ge=0.0, le=1.0)
    name: str | None = None


class AverageRequest(BaseModel):
    """Body for POST /evaluations/average (``list`` sources only)."""

    source_paths: list[str] = Field(..., min_length=1)
    min_recall: float | None = Field(None, ge=0.0, le=1.0)
    points: int | None = Field(None, ge=1, le=10_000)
    name: str | None = None


class CurvePoint(BaseModel):
    """Single (x, y) point of a stored curve."""

    x: float
    y: float


class CurveResponse(BaseModel):
    """A stored curve: ``pr``, ``spr``, ``roc`` or ``opr``."""

    evaluation_id: str
    kind: str
    points: list[CurvePoint]


class EvaluationSummary(BaseModel):
    """AUC scores and metadata of one stored evaluation."""

    id: str
    name: str
    source_format: str
    source_paths: list[str]
    total_positives: float | None
    total_negatives: float | None
    min_recall: float
    auc_pr: float
    auc_roc: float
    created_at: datetime | None = None
    curve_kinds: list[str]


class MemberScore(BaseModel):
    """Per-source scores reported alongside a vertical average."""

    name: str
    source_path: str
    auc_pr: float
    auc_roc: float


class AverageResponse(BaseModel):
    """Response for POST /evaluations/average."""

    evaluation: EvaluationSummary
    members: list[MemberScore]
