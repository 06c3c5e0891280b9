"""
Highlight Detection Module

Proposes annotated markers for a single series:
- IQR outliers (robust statistical outliers)
- Trend deviation (line series only): residuals far from a linear fit
- Key points: global maximum / minimum and sharp increases / decreases

When several detectors flag the same row the highest priority wins
(outlier > trendDeviation > keyPoint). Non-finite values are excised before
detection and every result is mapped back to its original row index.

Classes:
- HighlightDetector: runs the enabled detectors and merges their results
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Union

import numpy as np

from .config import DetectionToggles, HighlightConfig
from .data_models import HighlightPoint, HighlightType, SeriesType
from .features import finite_values_with_index, iqr_fences
from .regression import fit_index_trend

# Configure logging
logger = logging.getLogger(__name__)

REASON_IQR_OUTLIER = "IQR statistical outlier"
REASON_TREND_DEVIATION = "Deviates from overall trend"
REASON_GLOBAL_MAX = "Global maximum"
REASON_GLOBAL_MIN = "Global minimum"
REASON_CONSTANT = "Constant value"
REASON_SHARP_INCREASE = "Sharp increase"
REASON_SHARP_DECREASE = "Sharp decrease"


class HighlightDetector:
    """
    Outlier and key point detection for one series.

    Detector methods work on the compacted finite values and return local
    indices; detect() translates them back to dataset row indices.
    """

    def __init__(self, config: Optional[HighlightConfig] = None):
        self.config = config or HighlightConfig()

    def detect(self, values: Iterable, series_type: Union[SeriesType, str],
               toggles: Optional[DetectionToggles] = None) -> List[HighlightPoint]:
        """
        Run the enabled detectors over a series.

        Args:
            values: Raw values, one per dataset row (non-finite entries allowed)
            series_type: Rendering type of the series; trend deviation needs "line"
            toggles: Which detectors to run; None or all-off yields no highlights

        Returns:
            Highlights sorted by row index, at most one per index
        """
        if toggles is None or not toggles.any_enabled():
            return []

        clean, index_map = finite_values_with_index(values)
        if clean.size == 0:
            return []

        series_type = SeriesType(series_type)
        merged: Dict[int, HighlightPoint] = {}

        def add(points: List[HighlightPoint]):
            for point in points:
                existing = merged.get(point.index)
                if existing is None or point.priority > existing.priority:
                    merged[point.index] = point

        if toggles.check_outliers:
            add(self.detect_iqr_outliers(clean))
        if toggles.check_max_min:
            add(self.detect_global_extrema(clean))
        if toggles.check_sharp_change:
            add(self.detect_sharp_change(clean))
        if toggles.check_trend_deviation and series_type == SeriesType.LINE:
            add(self.detect_trend_deviation(clean))

        results = [
            HighlightPoint(
                index=int(index_map[point.index]),
                value=point.value,
                type=point.type,
                reason=point.reason
            )
            for point in sorted(merged.values(), key=lambda p: p.index)
        ]
        if results:
            logger.debug(f"Highlights: {[(p.index, p.type.value) for p in results]}")
        return results

    def detect_iqr_outliers(self, values: Sequence[float]) -> List[HighlightPoint]:
        if len(values) < self.config.min_samples_for_iqr:
            return []

        lower, upper, iqr = iqr_fences(values, self.config.iqr_multiplier)
        if iqr == 0:
            return []

        return [
            HighlightPoint(index=i, value=float(v), type=HighlightType.OUTLIER, reason=REASON_IQR_OUTLIER)
            for i, v in enumerate(values)
            if v < lower or v > upper
        ]

    def detect_trend_deviation(self, values: Sequence[float]) -> List[HighlightPoint]:
        """
        Flag residuals from a linear fit beyond trend_sigma standard deviations.

        Skipped when the fit explains too little variance: a deviation from
        a non-trend means nothing.
        """
        if len(values) < self.config.min_samples_for_trend:
            return []

        arr = np.asarray(values, dtype=float)
        fit = fit_index_trend(arr)
        if fit.r2 < self.config.min_r2_for_trend:
            return []

        residuals = arr - fit.predict(len(arr))
        mu = residuals.mean()
        sigma = residuals.std()
        if sigma == 0:
            return []

        return [
            HighlightPoint(index=i, value=float(arr[i]), type=HighlightType.TREND_DEVIATION,
                           reason=REASON_TREND_DEVIATION)
            for i, r in enumerate(residuals)
            if abs(r - mu) > self.config.trend_sigma * sigma
        ]

    def detect_global_extrema(self, values: Sequence[float]) -> List[HighlightPoint]:
        """Every occurrence of the maximum and minimum; a single marker for a constant series."""
        if len(values) == 0:
            return []

        arr = np.asarray(values, dtype=float)
        high = arr.max()
        low = arr.min()
        if high == low:
            return [HighlightPoint(index=0, value=float(arr[0]), type=HighlightType.KEY_POINT,
                                   reason=REASON_CONSTANT)]

        points = [
            HighlightPoint(index=int(i), value=float(high), type=HighlightType.KEY_POINT, reason=REASON_GLOBAL_MAX)
            for i in np.flatnonzero(arr == high)
        ]
        points.extend(
            HighlightPoint(index=int(i), value=float(low), type=HighlightType.KEY_POINT, reason=REASON_GLOBAL_MIN)
            for i in np.flatnonzero(arr == low)
        )
        return points

    def detect_sharp_change(self, values: Sequence[float]) -> List[HighlightPoint]:
        """Flag first differences beyond sharp_change_sigma standard deviations, at the later point."""
        if len(values) < self.config.min_samples_for_sharp_change:
            return []

        arr = np.asarray(values, dtype=float)
        diffs = np.diff(arr)
        mu = diffs.mean()
        sigma = diffs.std()
        if sigma == 0:
            return []

        return [
            HighlightPoint(
                index=i + 1,
                value=float(arr[i + 1]),
                type=HighlightType.KEY_POINT,
                reason=REASON_SHARP_INCREASE if d > 0 else REASON_SHARP_DECREASE
            )
            for i, d in enumerate(diffs)
            if abs(d - mu) > self.config.sharp_change_sigma * sigma
        ]


def auto_detect_outliers_and_keys(values: Iterable, series_type: Union[SeriesType, str],
                                  toggles: Optional[DetectionToggles] = None,
                                  config: Optional[HighlightConfig] = None) -> List[HighlightPoint]:
    return HighlightDetector(config).detect(values, series_type, toggles)
