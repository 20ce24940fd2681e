"""Point primitives shared by curves and confusion collections.

All tolerant comparisons go through :func:`compare_floats` so that the
geometric points, the confusion points and the curve comparator agree on
what "equal" means.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Two reals closer than this are treated as the same value.
EPSILON: float = 1e-7


def compare_floats(a: float, b: float, eps: float = EPSILON) -> int:
    """Three-way compare *a* and *b*, treating values within *eps* as equal."""
    if a + eps < b:
        return -1
    if a > b + eps:
        return 1
    return 0


def approx_equal(a: float, b: float, eps: float = EPSILON) -> bool:
    """Return ``True`` if *a* and *b* differ by at most *eps*."""
    return abs(a - b) <= eps


def compare_pairs(a: tuple[float, float], b: tuple[float, float]) -> int:
    """Lexicographic tolerant comparison of two ``(primary, secondary)`` pairs."""
    return compare_floats(a[0], b[0]) or compare_floats(a[1], b[1])


@dataclass(frozen=True, eq=False)
class Point:
    """Immutable (x, y) point in curve space."""

    x: float
    y: float

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            logger.warning(
                "Negative point coordinate (%s, %s) -- defaulting to (0, 0)",
                self.x,
                self.y,
            )
            object.__setattr__(self, "x", 0.0)
            object.__setattr__(self, "y", 0.0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return approx_equal(self.x, other.x) and approx_equal(self.y, other.y)

    def __lt__(self, other: Point) -> bool:
        return compare_pairs((self.x, self.y), (other.x, other.y)) < 0


@dataclass(frozen=True, eq=False)
class ConfusionPoint:
    """Immutable (true-positive, false-positive) count pair at one threshold.

    Counts are real-valued because weighted examples contribute fractional
    amounts.  Points order by ``tp`` first and ``fp`` second.
    """

    tp: float
    fp: float

    def __post_init__(self) -> None:
        if self.tp < 0 or self.fp < 0:
            logger.warning(
                "Negative confusion count (%s, %s) -- defaulting to (0, 0)",
                self.tp,
                self.fp,
            )
            object.__setattr__(self, "tp", 0.0)
            object.__setattr__(self, "fp", 0.0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfusionPoint):
            return NotImplemented
        return approx_equal(self.tp, other.tp) and approx_equal(self.fp, other.fp)

    def __lt__(self, other: ConfusionPoint) -> bool:
        return compare_pairs((self.tp, self.fp), (other.tp, other.fp)) < 0

    def recall(self, total_positives: float) -> float:
        return self.tp / total_positives

    def precision(self) -> float:
        return self.tp / (self.tp + self.fp)
