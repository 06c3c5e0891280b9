"""
Series Type Module

Recommends "bar" or "line" for a group of series.

Decision steps:
1. Too few rows -> bar
2. Many rows x series -> line (bars become unreadable)
3. Categorical (non-continuous) X axis -> bar
4. Trend vote: share of series with a clear linear trend, with a lower
   threshold for long datasets
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .config import SeriesTypeConfig
from .data_models import SeriesType
from .features import finite_values, iqr_fences, is_numeric_value
from .preprocess import column_values, get_metric_keys, to_frame
from .regression import fit_index_trend

# Configure logging
logger = logging.getLogger(__name__)

# Confidence weights: retained data, trend strength, fit quality, outlier impact
CONFIDENCE_WEIGHTS = (0.3, 0.3, 0.3, 0.1)

# Date-shaped strings. Bare numbers such as "2024" never match, so plain years
# are not mistaken for dates.
DATE_PATTERNS = [
    re.compile(r'^(?P<year>\d{4})\.(?P<month>\d{2})\.(?P<day>\d{2})'),
    re.compile(r'^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})'),
    re.compile(r'^(?P<year>\d{4})/(?P<month>\d{2})/(?P<day>\d{2})'),
    re.compile(r'^(?P<year>\d{4})年(?P<month>\d{1,2})月(?P<day>\d{1,2})日'),
    re.compile(r'^(?P<month>\d{2})\.(?P<day>\d{2})\.(?P<year>\d{4})'),
    re.compile(r'^(?P<month>\d{2})-(?P<day>\d{2})-(?P<year>\d{4})'),
    re.compile(r'^(?P<month>\d{2})/(?P<day>\d{2})/(?P<year>\d{4})'),
    re.compile(r'^(?P<month>\d{2})\.(?P<day>\d{2})$'),
    re.compile(r'^(?P<month>\d{2})-(?P<day>\d{2})$'),
    re.compile(r'^(?P<month>\d{2})/(?P<day>\d{2})$'),
    re.compile(r'^(?P<month>\d{1,2})月(?P<day>\d{1,2})日'),
]

# After the date only a time of day may follow (" 10:00", "T10:00:00Z", "T10:00:00+08:00")
TIME_SUFFIX = re.compile(r'^(?:[ T]\d{1,2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?$')

# Month-day labels carry no year; validate them against a leap year so 02-29 passes
YEARLESS_REFERENCE = 2000


@dataclass(frozen=True)
class TrendFit:
    slope: float = 0.0
    r2: float = 0.0
    confidence: float = 0.0
    range: float = 0.0


def is_date_value(value: Any) -> bool:
    """
    True for date objects and for strings that look like a date and parse to one.

    A string must match one of DATE_PATTERNS, name a real calendar day and
    carry nothing after the date except an optional time of day.
    """
    if isinstance(value, pd.Timestamp):
        return not pd.isna(value)
    if isinstance(value, (datetime, date, np.datetime64)):
        return not pd.isna(value)
    if not isinstance(value, str):
        return False

    text = value.strip()
    for pattern in DATE_PATTERNS:
        match = pattern.match(text)
        if match is None:
            continue
        if not TIME_SUFFIX.match(text[match.end():]):
            return False
        parts = match.groupdict()
        try:
            pd.Timestamp(
                year=int(parts.get('year') or YEARLESS_REFERENCE),
                month=int(parts['month']),
                day=int(parts['day'])
            )
        except ValueError:
            return False
        return True
    return False


def is_ordinal_numeric(values: Sequence[Any]) -> bool:
    """
    True when every value is a finite number and the sequence is monotonic.

    Accepts ascending (1, 5, 7, 14 / 202401, 202404) and descending sequences.
    """
    if len(values) < 2:
        return False
    if not all(is_numeric_value(v) and np.isfinite(v) for v in values):
        return False

    diffs = np.diff(np.asarray(values, dtype=float))
    return bool(np.all(diffs >= 0) or np.all(diffs <= 0))


def is_continuous_axis(values: Sequence[Any]) -> bool:
    if len(values) == 0:
        return False
    if all(is_date_value(v) for v in values):
        return True
    return is_ordinal_numeric(values)


def extract_y_series(rows: Sequence[Mapping[str, Any]], x_field: Optional[str],
                     metric_keys: Optional[Sequence[str]] = None,
                     min_valid_ratio: float = 0.5) -> Dict[str, np.ndarray]:
    """
    Collect the fields that hold enough numeric data to count as Y series.

    A field qualifies when more than min_valid_ratio of the rows hold finite
    numbers. Non-finite entries are dropped from the returned values.
    """
    frame = to_frame(rows)
    if frame.empty:
        return {}

    series = {}
    for key in get_metric_keys(frame, x_field, metric_keys):
        values = finite_values(column_values(frame, key))
        if len(values) > len(frame) * min_valid_ratio:
            series[key] = values
        else:
            logger.debug(f"Field '{key}' has {len(values)}/{len(frame)} numeric values - not a series")
    return series


def calc_linear_trend(values: Sequence[float], config: Optional[SeriesTypeConfig] = None) -> TrendFit:
    """
    Outlier-trimmed linear trend of a series against its index.

    IQR outliers are removed first (skipped when the IQR is zero). When too
    little data survives, a zero fit is returned instead of a guess.

    Returns:
        TrendFit with slope, R², confidence in [0, 1] and the value range of the
        filtered data (1 when flat)
    """
    config = config or SeriesTypeConfig()
    clean = finite_values(values)
    n = len(values)
    clean_n = len(clean)
    if n < 3 or clean_n < 3:
        return TrendFit()

    lower, upper, iqr = iqr_fences(clean, 1.5)
    outlier_impact = 1.0
    if iqr > 0:
        filtered = clean[(clean >= lower) & (clean <= upper)]
        outlier_impact = len(filtered) / clean_n
        final = filtered if len(filtered) >= 3 else clean
    else:
        final = clean

    final_n = len(final)
    if final_n < max(3, n * config.min_retained_ratio):
        logger.debug(f"Only {final_n}/{n} points left after IQR filter - no trend")
        return TrendFit()

    fit = fit_index_trend(final)
    value_range = float(final.max() - final.min()) or 1.0

    data_quality = final_n / n
    trend_strength = min(1.0, abs(fit.slope) / value_range)
    w_data, w_trend, w_fit, w_outlier = CONFIDENCE_WEIGHTS
    confidence = (
        data_quality * w_data
        + trend_strength * w_trend
        + fit.r2 * w_fit
        + outlier_impact * w_outlier
    )
    confidence = max(0.0, min(1.0, confidence))

    return TrendFit(
        slope=fit.slope,
        r2=fit.r2,
        confidence=confidence if np.isfinite(confidence) else 0.0,
        range=value_range
    )


def has_trend(fit: TrendFit, config: Optional[SeriesTypeConfig] = None) -> bool:
    """Strict thresholds for confident fits, looser ones otherwise."""
    config = config or SeriesTypeConfig()
    scale = 1.0 if fit.confidence > config.high_confidence else config.moderate_factor
    return (
        fit.r2 >= config.trend_r2_threshold * scale
        and abs(fit.slope) >= config.trend_slope_factor * fit.range * scale
    )


def auto_set_series_type(rows: Sequence[Mapping[str, Any]], x_field: str,
                         metric_keys: Optional[Sequence[str]] = None,
                         config: Optional[SeriesTypeConfig] = None) -> SeriesType:
    """
    Recommend bar or line for a group of series.

    Args:
        rows: Row records
        x_field: X axis field
        metric_keys: Optional axis group to restrict the decision to
        config: Series type configuration

    Returns:
        SeriesType.BAR or SeriesType.LINE
    """
    config = config or SeriesTypeConfig()
    if rows is None or len(rows) < 3:
        return SeriesType.BAR

    frame = to_frame(rows)
    row_count = len(frame)

    series = extract_y_series(frame, x_field, metric_keys, config.min_valid_ratio)
    if not series:
        logger.debug("No numeric series - bar")
        return SeriesType.BAR

    total_points = row_count * len(series)
    if total_points > config.max_gap_for_crowding:
        logger.info(f"{total_points} points exceed {config.max_gap_for_crowding} - line")
        return SeriesType.LINE

    if not is_continuous_axis(column_values(frame, x_field)):
        logger.info(f"X axis '{x_field}' is categorical - bar")
        return SeriesType.BAR

    trend_count = 0
    analysed = 0
    for key, values in series.items():
        if len(values) < 3:
            continue
        analysed += 1
        fit = calc_linear_trend(values, config)
        if has_trend(fit, config):
            trend_count += 1
        logger.debug(f"Series '{key}': slope={fit.slope:.4g} r2={fit.r2:.3f} "
                     f"confidence={fit.confidence:.3f} range={fit.range:.4g}")

    if analysed == 0:
        return SeriesType.BAR

    trend_ratio = trend_count / analysed
    bonus = config.point_bonus if row_count >= config.point_count_for_bonus else 0.0
    threshold = config.base_trend_threshold + bonus
    chosen = SeriesType.LINE if trend_ratio >= threshold else SeriesType.BAR
    logger.info(f"Trend vote {trend_count}/{analysed} = {trend_ratio:.2f} "
                f"(threshold {threshold:.2f}) -> {chosen.value}")
    return chosen
