import math

import pytest

from factor_calculator import statistics_engine as se
from factor_calculator.data_model import Row


def test_mean_of_empty_is_zero():
    assert se.mean([]) == 0.0


def test_mean_is_arithmetic_average():
    assert math.isclose(se.mean([0.5, 0.4, 0.6]), 0.5)


def test_std_dev_uses_population_variance():
    # sqrt(((1)^2 + 0 + (1)^2) / 3), not the n-1 sample form
    assert math.isclose(se.std_dev([1.0, 2.0, 3.0], 2.0), math.sqrt(2.0 / 3.0))
    assert math.isclose(se.std_dev([1.0, 2.0, 3.0], 2.0), 0.8165, abs_tol=1e-4)


def test_std_dev_of_empty_is_zero():
    assert se.std_dev([], 0.0) == 0.0


def test_std_dev_of_single_value_is_zero():
    assert se.std_dev([4.2], 4.2) == 0.0


def test_error_margin_percent():
    assert math.isclose(se.error_margin(0.5, 2.0), 25.0)


@pytest.mark.parametrize("sd", [0.0, 1.0, 123.4])
def test_error_margin_guards_zero_mean(sd):
    assert se.error_margin(sd, 0.0) == 0.0


def test_outlier_bounds():
    assert se.outlier_bounds(2.0, 0.5) == (1.0, 3.0)


def test_value_on_bound_is_not_an_outlier():
    # mean 1.0, std 0.5 -> upper bound exactly 2.0
    on_upper = Row(gross_weight=1.0, length=2.0, row_id=1)
    on_lower = Row(gross_weight=1.0, length=0.0, row_id=2)
    flagged = se.classify_outliers([on_upper, on_lower], 1.0, 0.5)
    assert [r.is_outlier for r in flagged] == [False, False]


def test_value_past_bound_is_an_outlier():
    above = Row(gross_weight=1.0, length=2.0 + 1e-9, row_id=1)
    flagged = se.classify_outliers([above], 1.0, 0.5)
    assert flagged[0].is_outlier is True


def test_classify_outliers_does_not_mutate_input():
    rows = [Row(1.0, 10.0, row_id=1), Row(1.0, 1.0, row_id=2)]
    flagged = se.classify_outliers(rows, 1.0, 0.1)
    assert [r.is_outlier for r in rows] == [False, False]
    assert [r.is_outlier for r in flagged] == [True, False]
    assert [r.row_id for r in flagged] == [1, 2]


def test_classify_outliers_clears_stale_flags():
    rows = [Row(1.0, 1.0, is_outlier=True, row_id=1)]
    assert se.classify_outliers(rows, 1.0, 0.0)[0].is_outlier is False


def test_summarize():
    summary = se.summarize([0.5, 0.5, 5.0])
    assert summary.count == 3
    assert math.isclose(summary.mean, 2.0)
    assert math.isclose(summary.std_dev, math.sqrt(4.5))
    assert math.isclose(summary.error_margin_percent, math.sqrt(4.5) / 2.0 * 100)
