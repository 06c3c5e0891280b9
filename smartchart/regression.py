"""
Regression Module

Simple linear regression of a series against its index position, used as a
time proxy by both the series type classifier and the trend deviation detector.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy.stats import linregress

# Configure logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinearFit:
    slope: float = 0.0
    intercept: float = 0.0
    r2: float = 0.0

    def predict(self, n: int) -> np.ndarray:
        return self.slope * np.arange(n) + self.intercept


def fit_index_trend(values: Sequence[float]) -> LinearFit:
    """
    Fit y = slope * i + intercept over i = 0..n-1.

    Fewer than 3 points gives a zero fit. A constant series has slope 0 and R² 0
    (no variance to explain).
    """
    y = np.asarray(values, dtype=float)
    n = y.size
    if n < 3:
        return LinearFit()

    if np.ptp(y) == 0:
        return LinearFit(slope=0.0, intercept=float(y[0]), r2=0.0)

    result = linregress(np.arange(n, dtype=float), y)
    slope = float(result.slope)
    intercept = float(result.intercept)
    r2 = float(result.rvalue) ** 2

    if not np.isfinite(slope) or not np.isfinite(intercept):
        logger.warning(f"Non-finite regression on {n} points, using zero fit")
        return LinearFit()

    return LinearFit(
        slope=slope,
        intercept=intercept,
        r2=max(0.0, min(1.0, r2)) if np.isfinite(r2) else 0.0
    )
