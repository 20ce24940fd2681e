"""Reduce scored, labeled examples to one confusion point per threshold."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from aucpr.exceptions import EmptyInputError, PointValidationError
from aucpr.services.confusion import ConfusionCollection
from aucpr.services.points import ConfusionPoint, approx_equal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Example:
    """A classifier score for one example, its true label and its weight."""

    score: float
    label: int
    weight: float = 1.0

    def __post_init__(self) -> None:
        if self.label not in (0, 1):
            raise ValueError(f"label must be 0 or 1, got {self.label!r}")
        if self.weight < 0:
            raise ValueError(f"weight cannot be negative, got {self.weight}")


class ThresholdReducer:
    """Sweep decision thresholds over a set of examples.

    Examples are ordered by descending score, positives before negatives at
    equal score.  Walking down that order accumulates the weighted positive
    and negative counts predicted positive; a :class:`ConfusionPoint` is
    emitted only where the score changes, so ties collapse into a single
    threshold.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def reduce(self, examples: Iterable[Example]) -> list[ConfusionPoint]:
        """Return the cumulative (tp, fp) counts at each distinct score."""
        ordered = sorted(examples, key=lambda e: (-e.score, -e.label))
        if not ordered:
            raise EmptyInputError("No examples to reduce")

        points: list[ConfusionPoint] = []
        positives = 0.0
        negatives = 0.0
        previous_score = ordered[0].score
        for example in ordered:
            if not approx_equal(example.score, previous_score):
                points.append(ConfusionPoint(positives, negatives))
            previous_score = example.score

            if example.label == 1:
                positives += example.weight
            else:
                negatives += example.weight
        points.append(ConfusionPoint(positives, negatives))

        self.log.debug(
            "Reduced %d examples to %d thresholds (%.4g positives, %.4g negatives)",
            len(ordered),
            len(points),
            positives,
            negatives,
        )
        return points

    def build_collection(self, examples: Iterable[Example]) -> ConfusionCollection:
        """Reduce *examples* and return a finalized :class:`ConfusionCollection`.

        Population totals are the final cumulative weighted counts.  The
        collection keeps the uninterpolated points as its ``original`` set.
        """
        points = self.reduce(examples)
        totals = points[-1]
        collection = ConfusionCollection(totals.tp, totals.fp, log=self.log)
        for point in points:
            try:
                collection.add_point(point.tp, point.fp)
            except PointValidationError as exc:
                # Only reachable when the totals were clamped to (1, 1).
                self.log.warning("Skipping threshold point: %s", exc)
        return collection.finalize()
