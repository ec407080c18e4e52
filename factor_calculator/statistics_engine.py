"""
Statistics engine for the Factor Calculator.

Mean, population standard deviation, error margin and ±2σ outlier
classification over row ratios.  All functions are pure; empty input
yields ``0.0`` rather than ``NaN``.

The standard deviation divides by *n* (``ddof=0``), not *n - 1*.
"""

from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

import numpy as np

from .constants import OUTLIER_SIGMA
from .data_model import Row


@dataclass(frozen=True)
class RatioSummary:
    """Mean, spread and error margin for a set of ratios."""
    mean: float
    std_dev: float
    error_margin_percent: float
    count: int


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; ``0.0`` for empty input."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def std_dev(values: Sequence[float], mean_value: float) -> float:
    """Population standard deviation about *mean_value*.

    Computes ``sqrt(sum((v - mean)^2) / n)``.  Returns ``0.0`` for empty input.
    """
    if len(values) == 0:
        return 0.0
    arr = np.asarray(values, dtype=float)
    return float(np.sqrt(np.sum((arr - mean_value) ** 2) / arr.size))


def error_margin(std_dev_value: float, mean_value: float) -> float:
    """Coefficient of variation in percent; ``0.0`` when the mean is zero."""
    if mean_value != 0:
        return (std_dev_value / mean_value) * 100.0
    return 0.0


def outlier_bounds(
    mean_value: float,
    std_dev_value: float,
    sigma: float = OUTLIER_SIGMA,
) -> Tuple[float, float]:
    """Return ``(lower, upper)`` = ``mean ∓ sigma·std_dev``."""
    spread = sigma * std_dev_value
    return mean_value - spread, mean_value + spread


def classify_outliers(
    rows: Sequence[Row],
    mean_value: float,
    std_dev_value: float,
    sigma: float = OUTLIER_SIGMA,
) -> List[Row]:
    """Return copies of *rows* with ``is_outlier`` set.

    A row is an outlier only if its ratio is strictly below the lower
    bound or strictly above the upper bound; a ratio sitting exactly on
    a bound is in range.  The input rows are not modified.
    """
    lower, upper = outlier_bounds(mean_value, std_dev_value, sigma)
    return [
        replace(row, is_outlier=(row.ratio < lower or row.ratio > upper))
        for row in rows
    ]


def summarize(ratios: Sequence[float]) -> RatioSummary:
    """Compute mean, standard deviation and error margin in one pass."""
    m = mean(ratios)
    sd = std_dev(ratios, m)
    return RatioSummary(
        mean=m,
        std_dev=sd,
        error_margin_percent=error_margin(sd, m),
        count=len(ratios),
    )
