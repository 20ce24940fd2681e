"""Confusion-space point collection: sort, interpolate, derive PR/ROC curves.

Interpolating between two PR operating points directly in recall/precision
space overestimates the area, because precision is not linear in the
underlying counts.  :class:`ConfusionCollection` therefore stores
(true-positive, false-positive) counts, fills the gaps between them at unit
steps of true positives along straight lines in count space, and only then
converts to recall/precision.

Lifecycle
---------
A collection starts in ``BUILDING`` and accepts ``add_*`` calls, each of
which is validated.  :meth:`ConfusionCollection.sort` moves it to
``SORTED`` and :meth:`ConfusionCollection.interpolate` to ``FINALIZED``;
curves and areas are only available once finalized, and no further points
are accepted after sorting.
"""

from __future__ import annotations

import logging
from enum import Enum

from aucpr.exceptions import CollectionStateError, PointValidationError
from aucpr.services.curve import Curve
from aucpr.services.points import EPSILON, ConfusionPoint, approx_equal

logger = logging.getLogger(__name__)


class CollectionState(str, Enum):
    BUILDING = "building"
    SORTED = "sorted"
    FINALIZED = "finalized"


class ConfusionCollection:
    """Population totals plus an ordered set of :class:`ConfusionPoint`.

    Parameters
    ----------
    total_positives, total_negatives:
        Weighted number of positive and negative examples in the dataset.
        Totals below 1 are replaced by ``(1, 1)`` with a warning so that the
        rate computations downstream never divide by zero.
    log:
        Diagnostics sink.  Defaults to this module's logger.
    """

    def __init__(
        self,
        total_positives: float,
        total_negatives: float,
        *,
        log: logging.Logger | None = None,
    ) -> None:
        self.log = log or logger
        if total_positives < 1 or total_negatives < 1:
            self.log.warning(
                "Invalid population totals (%s, %s) -- defaulting to (1, 1)",
                total_positives,
                total_negatives,
            )
            total_positives, total_negatives = 1.0, 1.0

        self.total_positives = float(total_positives)
        self.total_negatives = float(total_negatives)
        self.state = CollectionState.BUILDING
        self._points: list[ConfusionPoint] = []
        self._original: tuple[ConfusionPoint, ...] = ()

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        return (
            f"ConfusionCollection(total_positives={self.total_positives}, "
            f"total_negatives={self.total_negatives}, points={len(self._points)}, "
            f"state={self.state.value})"
        )

    @property
    def points(self) -> tuple[ConfusionPoint, ...]:
        return tuple(self._points)

    @property
    def original(self) -> tuple[ConfusionPoint, ...]:
        """Sorted points before interpolation; empty until :meth:`sort` runs."""
        return self._original

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def _append(self, point: ConfusionPoint) -> None:
        if self.state is not CollectionState.BUILDING:
            raise CollectionStateError(
                f"Cannot add points to a collection in state '{self.state.value}'"
            )
        self._points.append(point)

    def add_pr_point(self, recall: float, precision: float) -> None:
        """Add an operating point given as (recall, precision)."""
        if not (0.0 <= recall <= 1.0 and 0.0 <= precision <= 1.0):
            raise PointValidationError(
                f"PR point ({recall}, {precision}) is outside [0, 1]"
            )
        if precision == 0.0:
            raise PointValidationError(
                f"PR point ({recall}, {precision}) has zero precision"
            )

        tp = recall * self.total_positives
        fp = (tp - precision * tp) / precision
        self._append(ConfusionPoint(tp, fp))

    def add_roc_point(self, fpr: float, tpr: float) -> None:
        """Add an operating point given as (false-positive rate, true-positive rate)."""
        if not (0.0 <= fpr <= 1.0 and 0.0 <= tpr <= 1.0):
            raise PointValidationError(f"ROC point ({fpr}, {tpr}) is outside [0, 1]")

        self._append(
            ConfusionPoint(tpr * self.total_positives, fpr * self.total_negatives)
        )

    def add_point(self, tp: float, fp: float) -> None:
        """Add a raw (true-positive, false-positive) count pair."""
        if not (0.0 <= tp <= self.total_positives and 0.0 <= fp <= self.total_negatives):
            raise PointValidationError(
                f"Confusion point ({tp}, {fp}) is outside "
                f"[0, {self.total_positives}] x [0, {self.total_negatives}]"
            )
        self._append(ConfusionPoint(tp, fp))

    # ------------------------------------------------------------------
    # Finalizing
    # ------------------------------------------------------------------

    def sort(self) -> None:
        """Order the points and anchor both ends of the curve.

        - collapse epsilon-equal duplicates,
        - drop leading points with no true positives (recall and precision
          are undefined there),
        - prepend a point at one true positive, extrapolating the first
          point's false/true ratio, so PR has a value near recall 0,
        - append ``(total_positives, total_negatives)`` so the curve reaches
          full recall.
        """
        if self.state is not CollectionState.BUILDING:
            return
        if not self._points:
            self.log.error("No data to sort -- collection is empty")
            return

        ordered: list[ConfusionPoint] = []
        for point in sorted(self._points):
            if not ordered or ordered[-1] != point:
                ordered.append(point)

        while ordered and approx_equal(ordered[0].tp, 0.0):
            ordered.pop(0)

        if ordered and ordered[0].tp > 1:
            first = ordered[0]
            ordered.insert(0, ConfusionPoint(1.0, first.fp / first.tp))

        final = ConfusionPoint(self.total_positives, self.total_negatives)
        if all(point != final for point in ordered):
            ordered.append(final)
            ordered.sort()

        self._points = ordered
        self._original = tuple(ordered)
        self.state = CollectionState.SORTED
        self.log.debug("Sorted %d confusion points", len(ordered))

    def interpolate(self) -> None:
        """Fill every true-positive gap wider than one with unit-step points.

        Each inserted point lies on the straight line between its neighbours
        in (tp, fp) space.
        """
        if self.state is CollectionState.FINALIZED:
            return
        if self.state is not CollectionState.SORTED:
            raise CollectionStateError("sort() must run before interpolate()")

        filled: list[ConfusionPoint] = [self._points[0]]
        for start, end in zip(self._points, self._points[1:]):
            tp_gap = end.tp - start.tp
            step = 1
            while tp_gap - (step - 1) > 1 + EPSILON:
                fp = start.fp + step * (end.fp - start.fp) / tp_gap
                filled.append(ConfusionPoint(start.tp + step, fp))
                step += 1
            filled.append(end)

        self.log.debug(
            "Interpolated %d new points (%d total)",
            len(filled) - len(self._points),
            len(filled),
        )
        self._points = filled
        self.state = CollectionState.FINALIZED

    def finalize(self) -> ConfusionCollection:
        """Run :meth:`sort` then :meth:`interpolate`; return ``self``."""
        self.sort()
        if self.state is CollectionState.SORTED:
            self.interpolate()
        return self

    # ------------------------------------------------------------------
    # Derived curves
    # ------------------------------------------------------------------

    def _require_finalized(self) -> None:
        if self.state is not CollectionState.FINALIZED:
            raise CollectionStateError(
                "Collection must be sorted and interpolated before deriving curves "
                f"(state is '{self.state.value}')"
            )

    def to_pr_curve(self) -> Curve:
        """Precision (y) against recall (x); highest precision wins on ties."""
        self._require_finalized()
        curve = Curve(ascending=False)
        for point in self._points:
            curve.add(point.recall(self.total_positives), point.precision())
        return curve

    def to_roc_curve(self) -> Curve:
        """True-positive rate (y) against false-positive rate (x)."""
        self._require_finalized()
        curve = Curve(ascending=True)
        curve.add(0.0, 0.0)
        curve.add(1.0, 1.0)
        for point in self._points:
            curve.add(point.fp / self.total_negatives, point.tp / self.total_positives)
        return curve

    def auc_pr(self, min_recall: float = 0.0) -> float:
        return self.to_pr_curve().area(min_recall)

    def auc_roc(self) -> float:
        return self.to_roc_curve().area()

    def original_pr_points(self) -> list[tuple[float, float]]:
        """Uninterpolated (recall, precision) rows, one per distinct recall.

        When several original points share a recall, only the highest
        precision is kept.
        """
        if self.state is CollectionState.BUILDING:
            raise CollectionStateError("sort() must run before reading original points")

        rows: list[tuple[float, float]] = []
        for point in self._original:
            recall = point.recall(self.total_positives)
            precision = point.precision()
            if rows and approx_equal(rows[-1][0], recall):
                if precision > rows[-1][1]:
                    rows[-1] = (rows[-1][0], precision)
                continue
            rows.append((recall, precision))
        return rows
