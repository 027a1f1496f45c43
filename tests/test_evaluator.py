from decimal import Decimal

import pytest

from buildgate.gate.evaluator import compute_percentage, evaluate
from buildgate.gate.models import ComparisonMetrics


def test_evaluate_zero_finished_passes_without_percentage() -> None:
    verdict = evaluate(ComparisonMetrics(diff=0, finished=0), 50)
    assert verdict.passed is True
    assert verdict.percentage is None
    assert "Unable to calculate" in verdict.reason


def test_evaluate_within_threshold() -> None:
    verdict = evaluate(ComparisonMetrics(diff=10, finished=100), 50)
    assert verdict.passed is True
    assert verdict.percentage == 10.0
    assert "within the threshold" in verdict.reason


def test_evaluate_exceeds_threshold() -> None:
    verdict = evaluate(ComparisonMetrics(diff=60, finished=100), 50)
    assert verdict.passed is False
    assert verdict.percentage == 60.0
    assert "exceeds the threshold" in verdict.reason


def test_evaluate_equal_to_threshold_passes() -> None:
    verdict = evaluate(ComparisonMetrics(diff=50, finished=100), 50)
    assert verdict.passed is True
    assert verdict.percentage == 50.0


def test_evaluate_compares_rounded_percentage() -> None:
    # 1/3 -> 33.33, 2/3 -> 66.67
    assert evaluate(ComparisonMetrics(diff=1, finished=3), 33.33).passed is True
    assert evaluate(ComparisonMetrics(diff=2, finished=3), 66.66).passed is False


def test_compute_percentage_rounds_half_away_from_zero() -> None:
    assert compute_percentage(1, 3) == Decimal("33.33")
    assert compute_percentage(2, 3) == Decimal("66.67")
    assert compute_percentage(1, 8) == Decimal("12.50")
    assert compute_percentage(1, 16) == Decimal("6.25")
    # 1/1600 = 0.0625% -> 0.06; 1/800 = 0.125% -> 0.13
    assert compute_percentage(1, 1600) == Decimal("0.06")
    assert compute_percentage(1, 800) == Decimal("0.13")


def test_compute_percentage_requires_positive_total() -> None:
    with pytest.raises(ValueError):
        compute_percentage(1, 0)
