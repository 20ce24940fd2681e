"""Curve file export: tab-separated ``x<TAB>y`` rows, one per curve point.

File extensions follow the classic AUCCalculator layout:

- ``.pr``  interpolated precision-recall curve
- ``.spr`` PR curve resampled at fixed recall steps
- ``.roc`` ROC curve
- ``.opr`` original (uninterpolated) PR points, 10 decimal digits

:func:`export_result` is all-or-nothing: every file is first written to a
``.part`` sibling, and the targets are only replaced once all of them have
been written.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import pandas as pd

from aucpr.exceptions import EmptyCurveError, ExportError
from aucpr.repositories.storage import StorageBackend
from aucpr.services.curve import Curve
from aucpr.services.evaluation import EvaluationResult

logger = logging.getLogger(__name__)

_PART_SUFFIX = ".part"


def _curve_frame(curve: Curve) -> pd.DataFrame:
    if len(curve) == 0:
        raise EmptyCurveError("Cannot write a curve with no points")
    return curve.to_frame()


def _original_frame(rows: Sequence[tuple[float, float]]) -> pd.DataFrame:
    if not rows:
        raise EmptyCurveError("Cannot write original PR points: no data")
    return pd.DataFrame(list(rows), columns=["recall", "precision"])


def write_curve(
    curve: Curve, path: str, storage: StorageBackend | None = None
) -> None:
    """Write *curve* to *path* in curve order.

    Raises :class:`EmptyCurveError` (and writes nothing) for an empty curve,
    and :class:`ExportError` when the file cannot be written.
    """
    _write_frame(_curve_frame(curve), path, storage, float_format=None)


def write_original_pr(
    rows: Sequence[tuple[float, float]],
    path: str,
    storage: StorageBackend | None = None,
) -> None:
    """Write uninterpolated ``(recall, precision)`` rows with 10 decimals."""
    _write_frame(_original_frame(rows), path, storage, float_format="%.10f")


def export_result(
    result: EvaluationResult, prefix: str, storage: StorageBackend | None = None
) -> list[str]:
    """Write every curve of *result* to ``<prefix>.<kind>``; return the paths.

    Either all files are written or none are: on failure the staged
    ``.part`` files are removed and :class:`ExportError` is raised.
    """
    storage = storage or StorageBackend()

    planned: list[tuple[str, pd.DataFrame, str | None]] = []
    if result.original_pr is not None:
        planned.append((f"{prefix}.opr", _original_frame(result.original_pr), "%.10f"))
    planned.append((f"{prefix}.pr", _curve_frame(result.pr_curve), None))
    if result.standard_pr_curve is not None:
        planned.append((f"{prefix}.spr", _curve_frame(result.standard_pr_curve), None))
    planned.append((f"{prefix}.roc", _curve_frame(result.roc_curve), None))

    for path, _, _ in planned:
        if storage.isdir(path):
            raise ExportError(f"Cannot write {path}: it is a directory")

    staged: list[tuple[str, str]] = []
    try:
        for path, frame, float_format in planned:
            part = path + _PART_SUFFIX
            staged.append((part, path))
            _write_frame(frame, part, storage, float_format)
        for part, path in staged:
            logger.info("Writing %s", path)
            storage.move(part, path)
    except ExportError:
        _discard(staged, storage)
        raise
    except OSError as exc:
        _discard(staged, storage)
        raise ExportError(f"Cannot write curve files for {prefix}: {exc}") from exc

    return [path for path, _, _ in planned]


def _discard(staged: list[tuple[str, str]], storage: StorageBackend) -> None:
    for part, _ in staged:
        if storage.exists(part) and not storage.isdir(part):
            storage.remove(part)


def _write_frame(
    frame: pd.DataFrame,
    path: str,
    storage: StorageBackend | None,
    float_format: str | None,
) -> None:
    storage = storage or StorageBackend()
    try:
        with storage.open(path, "w", encoding="utf-8", newline="") as handle:
            frame.to_csv(
                handle,
                sep="\t",
                header=False,
                index=False,
                float_format=float_format,
                lineterminator="\n",
            )
    except OSError as exc:
        raise ExportError(f"Cannot write {path}: {exc}") from exc
