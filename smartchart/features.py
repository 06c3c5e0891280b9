"""
Feature Extraction Module

Per-metric statistics shared by every decision in the engine.

Median convention: for even-length input the median is the average of the two
central elements. Quartiles use linear interpolation between closest ranks.
Both conventions are used everywhere (line and pie paths) so results are
reproducible across components.

Functions:
- is_numeric_value: raw value type check (bools and strings are not numbers)
- finite_values / finite_values_with_index: numeric coercion with non-finite excision
- compute_stats: Stats for one series
- feature_vector: (min, max, median) clustering input
- quantile, iqr_fences: robust spread helpers
- gini_coefficient: dispersion of positive values
"""

import logging
from typing import Iterable, Sequence, Tuple

import numpy as np

from .data_models import FeatureVector, Stats

# Configure logging
logger = logging.getLogger(__name__)


def is_numeric_value(value) -> bool:
    """True for int/float values (numpy scalars included), False for bools, strings and None."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def finite_values_with_index(values: Iterable) -> Tuple[np.ndarray, np.ndarray]:
    """
    Keep the finite numeric values of a sequence.

    Args:
        values: Raw values, one slot per dataset row

    Returns:
        (finite values as float array, original index of each kept value)
    """
    kept = []
    indices = []
    for index, value in enumerate(values):
        if is_numeric_value(value) and np.isfinite(value):
            kept.append(float(value))
            indices.append(index)
    return np.asarray(kept, dtype=float), np.asarray(indices, dtype=int)


def finite_values(values: Iterable) -> np.ndarray:
    return finite_values_with_index(values)[0]


def quantile(sorted_values: Sequence[float], q: float) -> float:
    """Linear-interpolated quantile of an already sorted sequence; 0 when empty."""
    if len(sorted_values) == 0:
        return 0.0
    return float(np.quantile(np.asarray(sorted_values, dtype=float), q))


def iqr_fences(values: Sequence[float], multiplier: float = 1.5) -> Tuple[float, float, float]:
    """
    Tukey fences around the interquartile range.

    Returns:
        (lower fence, upper fence, iqr)
    """
    sorted_values = np.sort(np.asarray(values, dtype=float))
    q1 = quantile(sorted_values, 0.25)
    q3 = quantile(sorted_values, 0.75)
    iqr = q3 - q1
    return q1 - multiplier * iqr, q3 + multiplier * iqr, iqr


def compute_stats(values: Iterable) -> Stats:
    """
    Compute Stats over the finite values of a series.

    Empty (or all non-finite) input returns a zero-valued Stats instead of failing.
    """
    arr = finite_values(values)
    if arr.size == 0:
        return Stats()

    sorted_values = np.sort(arr)
    return Stats(
        min=float(sorted_values[0]),
        max=float(sorted_values[-1]),
        median=float(np.median(sorted_values)),
        mean=float(np.mean(sorted_values)),
        std=float(np.std(sorted_values)),
        q1=quantile(sorted_values, 0.25),
        q3=quantile(sorted_values, 0.75)
    )


def feature_vector(stats: Stats) -> FeatureVector:
    return (stats.min, stats.max, stats.median)


def gini_coefficient(values: Sequence[float]) -> float:
    """
    Gini coefficient as mean absolute pairwise difference over 2 * n^2 * mean.

    O(n^2) memory and time; callers only pass small slice lists.
    """
    arr = np.asarray(values, dtype=float)
    n = arr.size
    if n == 0:
        return 0.0
    mean = arr.mean()
    if mean <= 0:
        return 0.0
    pairwise = np.abs(arr[:, None] - arr[None, :]).sum()
    return float(pairwise / (2 * n * n * mean))
