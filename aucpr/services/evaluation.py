"""Evaluation service: builds confusion collections from sources and computes AUCs.

Two modes, mirroring how the command line and the API are used:

- a single source (``list``, ``pr`` or ``roc``) yields AUC-PR, AUC-ROC and
  the four exportable curves (interpolated PR, standardized PR, ROC and the
  original uninterpolated PR points),
- several ``list`` sources are evaluated independently and their PR and ROC
  curves vertically averaged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from aucpr.config import Settings, get_settings
from aucpr.exceptions import EmptyInputError, MissingTotalsError, PointValidationError
from aucpr.ingestion.formats import get_parser
from aucpr.repositories.storage import StorageBackend
from aucpr.services.confusion import ConfusionCollection
from aucpr.services.curve import Curve
from aucpr.services.threshold import ThresholdReducer

logger = logging.getLogger(__name__)

# Curve kinds, in export order.
CURVE_KINDS: tuple[str, ...] = ("opr", "pr", "spr", "roc")


@dataclass
class EvaluationResult:
    """AUC scores and curves for one source, or for a vertical average.

    *original_pr* holds raw ``(recall, precision)`` rows rather than a
    :class:`Curve`, because a curve would reorder and deduplicate them.
    Averaged results carry their per-source results in *members* and have no
    population totals, standardized curve or original points.
    """

    name: str
    source_format: str
    source_paths: list[str]
    min_recall: float
    auc_pr: float
    auc_roc: float
    pr_curve: Curve
    roc_curve: Curve
    standard_pr_curve: Curve | None = None
    original_pr: list[tuple[float, float]] | None = None
    total_positives: float | None = None
    total_negatives: float | None = None
    members: list[EvaluationResult] = field(default_factory=list)

    def curve_rows(self) -> dict[str, list[tuple[float, float]]]:
        """Return every available curve as ``kind -> [(x, y), ...]``."""
        rows: dict[str, list[tuple[float, float]]] = {}
        if self.original_pr is not None:
            rows["opr"] = list(self.original_pr)
        rows["pr"] = [(p.x, p.y) for p in self.pr_curve]
        if self.standard_pr_curve is not None:
            rows["spr"] = [(p.x, p.y) for p in self.standard_pr_curve]
        rows["roc"] = [(p.x, p.y) for p in self.roc_curve]
        return rows


class EvaluationService:
    """Orchestrates parse -> confusion collection -> curves -> AUC.

    Collaborators are injected:

    * *storage* -- fsspec-based storage used by the point-source parsers.
    * *settings* -- default minimum recall and curve resolutions.
    """

    def __init__(
        self,
        storage: StorageBackend | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.storage = storage or StorageBackend()
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Building collections
    # ------------------------------------------------------------------

    def build_collection(
        self,
        path: str,
        fmt: str,
        pos_count: float | None = None,
        neg_count: float | None = None,
    ) -> ConfusionCollection:
        """Read *path* in format *fmt* into a finalized collection.

        ``list`` sources derive their totals from the examples; ``pr`` and
        ``roc`` sources need positive *pos_count* and *neg_count*.
        """
        fmt = fmt.lower()
        parser = get_parser(fmt, self.storage)
        logger.info("Reading %s source %s", fmt, path)

        if fmt == "list":
            return ThresholdReducer().build_collection(parser.parse(path))

        if pos_count is None or neg_count is None or pos_count <= 0 or neg_count <= 0:
            raise MissingTotalsError(
                f"{fmt} sources require positive pos_count and neg_count"
            )

        collection = ConfusionCollection(pos_count, neg_count)
        add = collection.add_pr_point if fmt == "pr" else collection.add_roc_point
        rejected = 0
        for first, second in parser.parse(path):
            try:
                add(first, second)
            except PointValidationError as exc:
                rejected += 1
                logger.warning("Skipping %s point from %s: %s", fmt, path, exc)

        if len(collection) == 0:
            raise EmptyInputError(f"No valid {fmt} points in {path}")
        if rejected:
            logger.info("Rejected %d out-of-range %s points from %s", rejected, fmt, path)
        return collection.finalize()

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate_collection(
        self,
        collection: ConfusionCollection,
        *,
        name: str,
        source_format: str,
        source_paths: list[str],
        min_recall: float | None = None,
    ) -> EvaluationResult:
        """Compute AUCs and exportable curves for a finalized collection."""
        min_recall = self.settings.min_recall if min_recall is None else min_recall
        pr_curve = collection.to_pr_curve()
        roc_curve = collection.to_roc_curve()
        return EvaluationResult(
            name=name,
            source_format=source_format,
            source_paths=source_paths,
            min_recall=min_recall,
            auc_pr=pr_curve.area(min_recall),
            auc_roc=roc_curve.area(),
            pr_curve=pr_curve,
            roc_curve=roc_curve,
            standard_pr_curve=pr_curve.resample(self.settings.standard_points),
            original_pr=collection.original_pr_points(),
            total_positives=collection.total_positives,
            total_negatives=collection.total_negatives,
        )

    def evaluate_source(
        self,
        path: str,
        fmt: str,
        *,
        pos_count: float | None = None,
        neg_count: float | None = None,
        min_recall: float | None = None,
        name: str | None = None,
    ) -> EvaluationResult:
        """Evaluate a single point source."""
        collection = self.build_collection(path, fmt, pos_count, neg_count)
        result = self.evaluate_collection(
            collection,
            name=name or _default_name(path),
            source_format=fmt.lower(),
            source_paths=[path],
            min_recall=min_recall,
        )
        logger.info(
            "%s: AUC-PR=%.6f AUC-ROC=%.6f", result.name, result.auc_pr, result.auc_roc
        )
        return result

    def evaluate_average(
        self,
        paths: Sequence[str],
        *,
        min_recall: float | None = None,
        num: int | None = None,
        name: str | None = None,
    ) -> EvaluationResult:
        """Evaluate several ``list`` sources and vertically average their curves.

        Each source is evaluated independently; the averaged PR and ROC
        curves are sampled at ``num + 1`` evenly spaced x positions.
        """
        if not paths:
            raise EmptyInputError("At least one source is required for averaging")
        min_recall = self.settings.min_recall if min_recall is None else min_recall
        num = num or self.settings.average_points

        members = [
            self.evaluate_source(path, "list", min_recall=min_recall) for path in paths
        ]
        pr_curve = Curve.vertical_average([m.pr_curve for m in members], num)
        roc_curve = Curve.vertical_average([m.roc_curve for m in members], num)

        result = EvaluationResult(
            name=name or f"average of {len(members)} sources",
            source_format="average",
            source_paths=list(paths),
            min_recall=min_recall,
            auc_pr=pr_curve.area(min_recall),
            auc_roc=roc_curve.area(),
            pr_curve=pr_curve,
            roc_curve=roc_curve,
            members=members,
        )
        logger.info(
            "Vertically averaged %d sources: AUC-PR=%.6f AUC-ROC=%.6f",
            len(members),
            result.auc_pr,
            result.auc_roc,
        )
        return result


def _default_name(path: str) -> str:
    """Use the file stem as the evaluation name."""
    stem = Path(path).stem
    return stem if stem else "evaluation"
