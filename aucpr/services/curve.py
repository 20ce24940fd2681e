"""Piecewise-linear curves in [0,1] x [0,1] space.

A :class:`Curve` holds points sorted by x and joined by straight lines.  The
curve is extended horizontally from x=0 at the first point's y and from the
last point's y to x=1.  PR curves and ROC curves share this type; they differ
only in how points with the same x are ordered:

- ROC curves (``ascending=True``) keep the lowest y first,
- PR curves (``ascending=False``) keep the highest y first.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

import numpy as np
import pandas as pd

from aucpr.exceptions import EmptyCurveError
from aucpr.services.points import EPSILON, Point, compare_floats


class Curve:
    """Ordered, duplicate-suppressing collection of :class:`Point` objects."""

    def __init__(
        self,
        ascending: bool = True,
        points: Iterable[tuple[float, float]] = (),
    ) -> None:
        self.ascending = ascending
        self._points: list[Point] = []
        for x, y in points:
            self.add(x, y)

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __repr__(self) -> str:
        order = "asc" if self.ascending else "desc"
        return f"Curve({order}, {len(self._points)} points)"

    @property
    def first(self) -> Point:
        self._require_points("obtain the first point of")
        return self._points[0]

    @property
    def last(self) -> Point:
        self._require_points("obtain the last point of")
        return self._points[-1]

    def _compare(self, a: Point, b: Point) -> int:
        by_x = compare_floats(a.x, b.x)
        if by_x:
            return by_x
        by_y = compare_floats(a.y, b.y)
        return by_y if self.ascending else -by_y

    def _search(self, point: Point) -> tuple[int, bool]:
        """Binary search for *point*; return ``(index, found)``."""
        lo, hi = 0, len(self._points)
        while lo < hi:
            mid = (lo + hi) // 2
            order = self._compare(self._points[mid], point)
            if order < 0:
                lo = mid + 1
            elif order > 0:
                hi = mid
            else:
                return mid, True
        return lo, False

    def _first_at_or_after(self, x: float) -> int:
        """Index of the first point whose x is not below *x* (within EPSILON)."""
        lo, hi = 0, len(self._points)
        while lo < hi:
            mid = (lo + hi) // 2
            if compare_floats(self._points[mid].x, x) < 0:
                lo = mid + 1
            else:
                hi = mid
        return lo

    def _require_points(self, action: str) -> None:
        if not self._points:
            raise EmptyCurveError(f"Cannot {action} a curve with no points")

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, x: float, y: float) -> None:
        """Insert ``(x, y)`` unless an epsilon-equal point is already present."""
        point = Point(x, y)
        index, found = self._search(point)
        if not found:
            self._points.insert(index, point)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def lookup(self, x: float) -> float:
        """Return the y-value at *x*, linearly interpolating between points.

        When a point sits within EPSILON of *x*, the first such point in
        curve order wins: the highest y on a PR curve, the lowest on a ROC
        curve.
        """
        self._require_points("obtain a y-value for")
        index = self._first_at_or_after(x)
        if index < len(self._points) and abs(self._points[index].x - x) <= EPSILON:
            return self._points[index].y

        before = self._points[index - 1] if index > 0 else Point(0.0, self.first.y)
        if index < len(self._points):
            after = self._points[index]
        else:
            after = Point(1.0, self.last.y)
        if after.x - before.x <= EPSILON:
            return after.y

        slope = (after.y - before.y) / (after.x - before.x)
        return before.y + (x - before.x) * slope

    def area(self, min_x: float = 0.0) -> float:
        """Trapezoidal area under the curve for ``min_x <= x <= 1.0``."""
        self._require_points("find the area of")

        area = 0.0
        prev = Point(0.0, self.first.y)
        closing = Point(1.0, self.last.y)
        for point in [*self._points, closing]:
            if point.x >= min_x:
                if prev.x < min_x:
                    # Segment straddles min_x: integrate only the part to its right.
                    slope = (point.y - prev.y) / (point.x - prev.x)
                    y_at_min = prev.y + slope * (min_x - prev.x)
                    area += 0.5 * (point.x - min_x) * (point.y + y_at_min)
                else:
                    area += 0.5 * (point.x - prev.x) * (point.y + prev.y)
            prev = point
        return area

    def resample(self, num: int) -> Curve:
        """Return a new curve with ``num + 1`` points evenly spaced on [0, 1]."""
        if num < 1:
            raise ValueError(f"num must be >= 1, got {num}")
        resampled = Curve(self.ascending)
        for x in np.linspace(0.0, 1.0, num + 1):
            resampled.add(float(x), self.lookup(float(x)))
        return resampled

    @staticmethod
    def vertical_average(curves: Sequence[Curve], num: int = 100) -> Curve:
        """Average *curves* by their y-values at ``num + 1`` fixed x positions.

        The result uses the first curve's tie-break direction.
        """
        if not curves:
            raise ValueError("Cannot average an empty list of curves")
        if num < 1:
            raise ValueError(f"num must be >= 1, got {num}")

        averaged = Curve(curves[0].ascending)
        for x in np.linspace(0.0, 1.0, num + 1):
            x = float(x)
            y = float(np.mean([curve.lookup(x) for curve in curves]))
            averaged.add(x, y)
        return averaged

    def to_frame(self) -> pd.DataFrame:
        """Return the points as a DataFrame with ``x`` and ``y`` columns."""
        return pd.DataFrame(
            {
                "x": [p.x for p in self._points],
                "y": [p.y for p in self._points],
            }
        )
