"""Tests for ConfusionCollection: validation, lifecycle and TP-space interpolation."""

import logging

import pytest

from aucpr.exceptions import CollectionStateError, PointValidationError
from aucpr.services.confusion import CollectionState, ConfusionCollection
from aucpr.services.curve import Curve
from aucpr.services.points import EPSILON


def _pairs(points) -> list[tuple[float, float]]:
    return [(p.tp, p.fp) for p in points]


@pytest.fixture()
def half_precision() -> ConfusionCollection:
    """Totals (10, 10) with one operating point at recall 0.5, precision 0.5."""
    collection = ConfusionCollection(10, 10)
    collection.add_point(5, 5)
    return collection.finalize()


# ------------------------------------------------------------------
# Construction and validation
# ------------------------------------------------------------------


def test_invalid_totals_default_to_one(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        collection = ConfusionCollection(0, 5)
    assert (collection.total_positives, collection.total_negatives) == (1.0, 1.0)
    assert "Invalid population totals" in caplog.text


def test_injected_logger_receives_diagnostics(caplog) -> None:
    custom = logging.getLogger("tests.custom")
    with caplog.at_level(logging.WARNING, logger="tests.custom"):
        ConfusionCollection(0.5, 0.5, log=custom)
    assert any(r.name == "tests.custom" for r in caplog.records)


@pytest.mark.parametrize(
    ("recall", "precision"),
    [(1.5, 0.5), (0.5, -0.1), (-0.2, 0.4), (0.5, 0.0)],
)
def test_add_pr_point_rejects_invalid(recall: float, precision: float) -> None:
    collection = ConfusionCollection(10, 10)
    with pytest.raises(PointValidationError):
        collection.add_pr_point(recall, precision)
    assert len(collection) == 0


def test_add_roc_point_rejects_out_of_range() -> None:
    collection = ConfusionCollection(10, 10)
    with pytest.raises(PointValidationError):
        collection.add_roc_point(-0.1, 0.5)
    with pytest.raises(PointValidationError):
        collection.add_roc_point(0.5, 1.1)
    assert len(collection) == 0


def test_add_point_rejects_counts_above_totals() -> None:
    collection = ConfusionCollection(10, 10)
    with pytest.raises(PointValidationError):
        collection.add_point(11, 0)


def test_pr_point_converts_to_counts() -> None:
    collection = ConfusionCollection(10, 10)
    collection.add_pr_point(0.5, 0.5)
    assert _pairs(collection.points) == [(5.0, 5.0)]


def test_roc_point_converts_to_counts() -> None:
    collection = ConfusionCollection(10, 20)
    collection.add_roc_point(0.25, 0.5)
    assert _pairs(collection.points) == [(5.0, 5.0)]


# ------------------------------------------------------------------
# Lifecycle
# ------------------------------------------------------------------


def test_curves_require_finalize() -> None:
    collection = ConfusionCollection(10, 10)
    collection.add_point(5, 5)
    with pytest.raises(CollectionStateError):
        collection.to_pr_curve()
    collection.sort()
    with pytest.raises(CollectionStateError):
        collection.to_roc_curve()


def test_add_after_sort_raises() -> None:
    collection = ConfusionCollection(10, 10)
    collection.add_point(5, 5)
    collection.sort()
    with pytest.raises(CollectionStateError):
        collection.add_point(6, 6)


def test_interpolate_before_sort_raises() -> None:
    collection = ConfusionCollection(10, 10)
    collection.add_point(5, 5)
    with pytest.raises(CollectionStateError):
        collection.interpolate()


def test_sort_and_interpolate_are_idempotent(half_precision: ConfusionCollection) -> None:
    before = _pairs(half_precision.points)
    half_precision.sort()
    half_precision.interpolate()
    assert _pairs(half_precision.points) == before
    assert half_precision.state is CollectionState.FINALIZED


def test_sort_empty_collection_logs_error(caplog) -> None:
    collection = ConfusionCollection(10, 10)
    with caplog.at_level(logging.ERROR):
        collection.sort()
    assert "No data to sort" in caplog.text
    assert collection.state is CollectionState.BUILDING


# ------------------------------------------------------------------
# Sort and interpolate
# ------------------------------------------------------------------


def test_sort_collapses_duplicates_and_drops_zero_tp() -> None:
    collection = ConfusionCollection(4, 4)
    for tp, fp in [(2, 1), (0, 1), (1, 0), (2, 1 + 1e-9), (0, 0)]:
        collection.add_point(tp, fp)
    collection.sort()
    assert _pairs(collection.points) == [(1, 0), (2, 1), (4, 4)]


def test_sort_prepends_unit_point_and_appends_totals() -> None:
    collection = ConfusionCollection(10, 10)
    collection.add_point(4, 2)
    collection.sort()
    assert _pairs(collection.points) == [(1, 0.5), (4, 2), (10, 10)]


def test_interpolation_fills_unit_steps(half_precision: ConfusionCollection) -> None:
    assert _pairs(half_precision.points) == [(float(k), float(k)) for k in range(1, 11)]


def test_interpolated_tp_gaps_at_most_one() -> None:
    collection = ConfusionCollection(37.5, 80)
    for tp, fp in [(2.5, 0), (9, 4), (9, 12), (20.25, 30), (31, 64)]:
        collection.add_point(tp, fp)
    collection.finalize()
    points = collection.points
    for a, b in zip(points, points[1:]):
        assert b.tp >= a.tp
        assert b.tp - a.tp <= 1 + EPSILON


def test_original_keeps_uninterpolated_points(half_precision: ConfusionCollection) -> None:
    assert _pairs(half_precision.original) == [(1, 1), (5, 5), (10, 10)]


def test_original_pr_points_keep_best_precision() -> None:
    collection = ConfusionCollection(10, 10)
    collection.add_point(5, 1)
    collection.add_point(5, 3)
    collection.finalize()
    rows = collection.original_pr_points()
    assert [r for r, _ in rows] == pytest.approx([0.1, 0.5, 1.0])
    assert rows[1][1] == pytest.approx(5 / 6)
    assert rows[2][1] == pytest.approx(0.5)


# ------------------------------------------------------------------
# Curves and areas
# ------------------------------------------------------------------


def test_constant_precision_area(half_precision: ConfusionCollection) -> None:
    assert half_precision.auc_pr() == pytest.approx(0.5)
    assert half_precision.auc_roc() == pytest.approx(0.5)


def test_roc_curve_spans_unit_interval(half_precision: ConfusionCollection) -> None:
    roc = half_precision.to_roc_curve()
    assert roc.first.x == 0.0
    assert roc.last.x == 1.0


def test_pr_curve_is_descending(half_precision: ConfusionCollection) -> None:
    assert half_precision.to_pr_curve().ascending is False


def test_tp_space_interpolation_is_below_naive_line() -> None:
    """Precision is not linear in recall, so the curve sags below the straight line."""
    collection = ConfusionCollection(10, 90)
    collection.add_point(1, 0)
    collection.add_point(10, 90)
    collection.finalize()

    naive = Curve(ascending=False, points=[(0.1, 1.0), (1.0, 0.1)])
    assert naive.area() == pytest.approx(0.595)
    assert collection.auc_pr() < 0.3


def test_auc_pr_min_recall() -> None:
    collection = ConfusionCollection(10, 10)
    collection.add_point(5, 5)
    collection.finalize()
    assert collection.auc_pr(0.5) == pytest.approx(0.25)
